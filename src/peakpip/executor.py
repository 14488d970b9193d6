from __future__ import annotations

import shlex
import shutil
import subprocess
from typing import List, Optional, Sequence

from .config import Config
from .errors import InitializationError, SubprocessError
from .logger import setup_logger

_logger = setup_logger()


def _which(candidates: Sequence[str]) -> Optional[str]:
    for name in candidates:
        path = shutil.which(name)
        if path:
            return path
    return None


class Executor:
    """
    Runs argument lists against the wrapped package manager.

    ``run`` lets the manager write straight to the caller's stdout/stderr.
    ``probe`` discards all output and only reports the exit status.
    """

    def run(self, args: Sequence[str]) -> int:
        raise NotImplementedError

    def probe(self, args: Sequence[str]) -> int:
        raise NotImplementedError


class SubprocessExecutor(Executor):
    def __init__(self, pip_path: str, python_path: str) -> None:
        self.pip_path = pip_path
        self.python_path = python_path

    @classmethod
    def discover(cls, config: Optional[Config] = None) -> "SubprocessExecutor":
        """Locate python and pip, honoring explicit paths from the config file."""
        python_path = _which([config.python_path] if config and config.python_path else ["python3", "python"])
        if not python_path:
            raise InitializationError("python executable not found in PATH")

        pip_path = _which([config.pip_path] if config and config.pip_path else ["pip3", "pip"])
        if not pip_path:
            raise InitializationError("pip executable not found in PATH")

        _logger.debug("Using python=%s pip=%s", python_path, pip_path)
        return cls(pip_path, python_path)

    def _argv(self, args: Sequence[str]) -> List[str]:
        argv = [self.pip_path, *args]
        _logger.debug("Running: %s", shlex.join(argv))
        return argv

    def run(self, args: Sequence[str]) -> int:
        try:
            return subprocess.run(self._argv(args), check=False).returncode
        except OSError as e:
            raise SubprocessError(f"could not start {self.pip_path}: {e}") from e

    def probe(self, args: Sequence[str]) -> int:
        try:
            return subprocess.run(
                self._argv(args),
                check=False,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            ).returncode
        except OSError as e:
            raise SubprocessError(f"could not start {self.pip_path}: {e}") from e
