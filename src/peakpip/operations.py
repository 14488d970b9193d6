from __future__ import annotations

import concurrent.futures
import sys
from typing import Callable, List, Optional, Sequence, TypeVar

from tqdm import tqdm

from .config import OperationConfig
from .errors import SubprocessError, UsageError
from .executor import Executor
from .index_client import IndexClient
from .logger import setup_logger
from .models import PackageRecord

_logger = setup_logger()

T = TypeVar("T")


# -------------------------
# Argument construction
# -------------------------
# Order is always: manager verb, behavior flags, target/destination options,
# then the trailing package name or requirements file.

def _verbosity_flags(options: OperationConfig) -> List[str]:
    flags = []
    if options.quiet:
        flags.append("--quiet")
    if options.verbose:
        flags.append("--verbose")
    return flags


def install_args(options: OperationConfig, package: str) -> List[str]:
    args = ["install", *_verbosity_flags(options)]
    if options.user:
        args.append("--user")
    if options.target:
        args += ["--target", options.target]
    args.append(package)
    return args


def requirements_args(options: OperationConfig, requirements: str) -> List[str]:
    args = ["install", *_verbosity_flags(options)]
    if options.user:
        args.append("--user")
    if options.target:
        args += ["--target", options.target]
    args += ["-r", requirements]
    return args


def uninstall_args(options: OperationConfig, package: str) -> List[str]:
    return ["uninstall", "-y", *_verbosity_flags(options), package]


def upgrade_args(options: OperationConfig, package: str) -> List[str]:
    args = ["install", "--upgrade", *_verbosity_flags(options)]
    if options.user:
        args.append("--user")
    args.append(package)
    return args


def download_args(options: OperationConfig, package: str, dest: Optional[str] = None) -> List[str]:
    args = ["download", *_verbosity_flags(options)]
    if dest:
        args += ["--dest", dest]
    args.append(package)
    return args


def list_args(options: OperationConfig, outdated: bool = False) -> List[str]:
    args = ["list"]
    if outdated:
        args.append("--outdated")
    return args + _verbosity_flags(options)


def freeze_args() -> List[str]:
    return ["freeze"]


def check_args(package: str) -> List[str]:
    return ["show", package]


# -------------------------
# Formatting
# -------------------------
def format_record(record: PackageRecord, verbose: bool = False) -> str:
    lines = [
        f"name: {record.name}",
        f"version: {record.version}",
        f"summary: {record.summary}",
        f"author: {record.author}",
        f"homepage: {record.homepage}",
        f"license: {record.license}",
    ]
    if record.dependencies:
        lines.append("dependencies:")
        lines.extend(f"  {dep}" for dep in record.dependencies)
    if record.classifiers:
        lines.append("classifiers:")
        lines.extend(f"  {c}" for c in record.classifiers)
    if verbose and record.files:
        lines.append("files:")
        for f in record.files:
            lines.append(f"  {f.filename} ({f.packagetype}, {f.size // 1024} k) sha256={f.sha256}")
    return "\n".join(lines)


def _require_names(verb: str, names: Sequence[str]) -> None:
    if not names:
        raise UsageError(f"{verb} requires at least one package name")


class Dispatcher:
    """Maps each CLI verb onto the wrapped manager or the index client."""

    def __init__(self, executor: Executor, index: IndexClient, options: OperationConfig) -> None:
        self.executor = executor
        self.index = index
        self.options = options

    # -------------------------
    # Helpers
    # -------------------------
    def _run(self, verb: str, package: str, args: Sequence[str]) -> None:
        rc = self.executor.run(args)
        if rc != 0:
            raise SubprocessError(f"failed to {verb} {package}: pip exited with status {rc}", returncode=rc)

    def _fan_out(
        self,
        desc: str,
        func: Callable[[str], T],
        names: Sequence[str],
        on_result: Callable[[int, str, T], None],
    ) -> None:
        """
        Apply func to every name on a bounded thread pool.

        on_result is called in input order as results become available; the
        first failure in input order is raised and anything not yet started
        is cancelled.
        """
        workers = max(1, min(self.options.concurrent, len(names)))
        disable_bar = self.options.quiet or len(names) < 2 or not sys.stderr.isatty()
        _logger.debug("%s: %d package(s) on %d worker(s)", desc, len(names), workers)

        pool = concurrent.futures.ThreadPoolExecutor(max_workers=workers)
        try:
            futures = [pool.submit(func, name) for name in names]
            with tqdm(total=len(names), desc=desc, unit="pkg", leave=False, disable=disable_bar) as bar:
                for i, (name, fut) in enumerate(zip(names, futures)):
                    result = fut.result()
                    bar.update(1)
                    on_result(i, name, result)
        finally:
            pool.shutdown(wait=True, cancel_futures=True)

    # -------------------------
    # Verbs backed by the wrapped manager
    # -------------------------
    def install(self, names: Sequence[str], requirements: Optional[str] = None) -> None:
        if not names and not requirements:
            raise UsageError("install requires at least one package name or a requirements file")

        if requirements:
            if self.options.dry_run:
                print(f"would install requirements from: {requirements}")
            else:
                self._run("install requirements from", requirements, requirements_args(self.options, requirements))

        for pkg in names:
            if self.options.dry_run:
                print(f"would install: {pkg}")
                continue
            self._run("install", pkg, install_args(self.options, pkg))

    def uninstall(self, names: Sequence[str]) -> None:
        _require_names("uninstall", names)
        for pkg in names:
            if self.options.dry_run:
                print(f"would uninstall: {pkg}")
                continue
            self._run("uninstall", pkg, uninstall_args(self.options, pkg))

    def upgrade(self, names: Sequence[str]) -> None:
        _require_names("upgrade", names)
        for pkg in names:
            if self.options.dry_run:
                print(f"would upgrade: {pkg}")
                continue
            self._run("upgrade", pkg, upgrade_args(self.options, pkg))

    def download(self, names: Sequence[str], dest: Optional[str] = None) -> None:
        _require_names("download", names)
        for pkg in names:
            if self.options.dry_run:
                print(f"would download: {pkg} to {dest or '.'}")
                continue
            self._run("download", pkg, download_args(self.options, pkg, dest))

    def list_packages(self, outdated: bool = False) -> None:
        if self.options.dry_run:
            print(f"would list: {'outdated' if outdated else 'installed'} packages")
            return
        rc = self.executor.run(list_args(self.options, outdated))
        if rc != 0:
            raise SubprocessError(f"failed to list packages: pip exited with status {rc}", returncode=rc)

    def freeze(self) -> None:
        if self.options.dry_run:
            print("would freeze: installed packages")
            return
        rc = self.executor.run(freeze_args())
        if rc != 0:
            raise SubprocessError(f"failed to freeze packages: pip exited with status {rc}", returncode=rc)

    def check(self, names: Sequence[str]) -> None:
        _require_names("check", names)
        if self.options.dry_run:
            for pkg in names:
                print(f"would check: {pkg}")
            return

        def report(_i: int, pkg: str, rc: int) -> None:
            print(f"{pkg}: {'installed' if rc == 0 else 'not installed'}")

        self._fan_out("check", lambda pkg: self.executor.probe(check_args(pkg)), names, report)

    # -------------------------
    # Verbs backed by the index
    # -------------------------
    def show(self, names: Sequence[str]) -> None:
        _require_names("show", names)

        def emit(i: int, _pkg: str, record: PackageRecord) -> None:
            if i:
                print("---")
            print(format_record(record, verbose=self.options.verbose))

        self._fan_out("show", self.index.fetch_record, names, emit)

    def search(self, query: str) -> None:
        if not query or not query.strip():
            raise UsageError("search requires exactly one non-empty query")
        results = self.index.search(query.strip())
        if not results:
            print("No packages found.")
        for record in results:
            print(record)
