import argparse
import configparser
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import InitializationError
from .logger import setup_logger

_logger = setup_logger()

DEFAULT_INDEX_URL = "https://pypi.org/pypi"
DEFAULT_SIMPLE_URL = "https://pypi.org/simple"
DEFAULT_TIMEOUT = 30
MAX_CONCURRENCY = 10


def default_config_path() -> Path:
    env_path = os.environ.get("PEAKPIP_CONFIG")
    if env_path:
        return Path(env_path)
    return Path.home() / ".config" / "peakpip" / "peakpip.conf"


class Config:
    """Settings read from the optional peakpip.conf file. Nothing is ever written back."""

    def __init__(self, config_path: Optional[Path] = None) -> None:
        self.config_path = Path(config_path) if config_path else default_config_path()

        # [general]
        self.pip_path: Optional[str] = None
        self.python_path: Optional[str] = None
        self.concurrent: int = MAX_CONCURRENCY

        # [index]
        self.index_url: str = DEFAULT_INDEX_URL
        self.simple_url: str = DEFAULT_SIMPLE_URL

        # [network]
        self.timeout: float = DEFAULT_TIMEOUT
        self.retries: int = 0
        self.verify_ssl: bool = True
        self.ca_bundle: Optional[str] = None
        self.proxy_url: Optional[str] = None

        self.load()

    def load(self) -> None:
        if not self.config_path.exists():
            _logger.debug("Config file %s not found, using defaults.", self.config_path)
            return

        try:
            self._parse(self.config_path)
        except (configparser.Error, ValueError) as e:
            raise InitializationError(f"invalid config {self.config_path}: {e}") from e
        _logger.debug("Loaded config from %s", self.config_path)

        if self.concurrent < 1:
            _logger.warning("Ignoring invalid concurrent=%d in %s", self.concurrent, self.config_path)
            self.concurrent = MAX_CONCURRENCY

    def _parse(self, path: Path) -> None:
        parser = configparser.ConfigParser()
        parser.read(path)

        if parser.has_section("general"):
            self.pip_path = parser.get("general", "pip", fallback="") or None
            self.python_path = parser.get("general", "python", fallback="") or None
            self.concurrent = parser.getint("general", "concurrent", fallback=self.concurrent)

        if parser.has_section("index"):
            self.index_url = parser.get("index", "url", fallback=self.index_url).rstrip("/")
            self.simple_url = parser.get("index", "simple_url", fallback=self.simple_url).rstrip("/")

        if parser.has_section("network"):
            self.timeout = parser.getfloat("network", "timeout", fallback=self.timeout)
            self.retries = parser.getint("network", "retries", fallback=self.retries)
            self.verify_ssl = parser.getboolean("network", "verify_ssl", fallback=True)
            # Empty strings map to None
            self.ca_bundle = parser.get("network", "ca_bundle", fallback="") or None
            self.proxy_url = parser.get("network", "proxy_url", fallback="") or None


@dataclass(frozen=True)
class OperationConfig:
    quiet: bool = False
    verbose: bool = False
    dry_run: bool = False
    user: bool = False
    target: Optional[str] = None
    concurrent: int = MAX_CONCURRENCY

    @classmethod
    def from_args(cls, args: argparse.Namespace, config: Config) -> "OperationConfig":
        concurrent = getattr(args, "concurrent", None)
        return cls(
            quiet=bool(getattr(args, "quiet", False)),
            verbose=bool(getattr(args, "verbose", False)),
            dry_run=bool(getattr(args, "dry_run", False)),
            user=bool(getattr(args, "user", False)),
            target=getattr(args, "target", None) or None,
            concurrent=concurrent if concurrent is not None else config.concurrent,
        )
