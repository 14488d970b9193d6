# cli.py
import argparse
import sys
from typing import List, Optional

from .config import Config, OperationConfig
from .errors import PeakPipError, SubprocessError
from .executor import SubprocessExecutor
from .index_client import IndexClient
from .logger import set_verbosity, setup_logger
from .operations import Dispatcher

_logger = setup_logger()

# Flags consumed by OperationConfig rather than passed to the verb
_GLOBAL_FLAGS = ("quiet", "verbose", "dry_run", "concurrent", "user", "target")


def positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if n < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return n


class PeakPipParser(argparse.ArgumentParser):
    """Usage errors exit 1 like every other failure."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    common = PeakPipParser(add_help=False)
    common.add_argument("--quiet", "-q", action="store_true", help="Give less output")
    common.add_argument("--verbose", "-v", action="store_true", help="Give more output")
    common.add_argument(
        "--dry-run", dest="dry_run", action="store_true",
        help="Don't actually do anything, just print what would be done",
    )
    common.add_argument(
        "--concurrent", type=positive_int, default=None, metavar="N",
        help="Max parallel operations for show/check (default: 10)",
    )

    parser = PeakPipParser(prog="peakpip", description="peakpip - a thin wrapper around pip")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ------------------------
    # Wrapped manager commands
    # ------------------------

    p_install = subparsers.add_parser("install", parents=[common], help="Install packages")
    p_install.add_argument("names", nargs="*", metavar="package")
    p_install.add_argument("--user", "-U", action="store_true", help="Install to user directory")
    p_install.add_argument("--target", "-t", metavar="DIR", help="Install packages into target directory")
    p_install.add_argument("--requirements", "-r", metavar="FILE", help="Install from requirements file")
    p_install.set_defaults(func=Dispatcher.install)

    p_uninstall = subparsers.add_parser("uninstall", parents=[common], help="Uninstall packages")
    p_uninstall.add_argument("names", nargs="*", metavar="package")
    p_uninstall.set_defaults(func=Dispatcher.uninstall)

    p_list = subparsers.add_parser("list", parents=[common], help="List installed packages")
    p_list.add_argument("--outdated", action="store_true", help="List outdated packages")
    p_list.set_defaults(func=Dispatcher.list_packages)

    p_upgrade = subparsers.add_parser("upgrade", parents=[common], help="Upgrade packages")
    p_upgrade.add_argument("names", nargs="*", metavar="package")
    p_upgrade.add_argument("--user", "-U", action="store_true", help="Install to user directory")
    p_upgrade.set_defaults(func=Dispatcher.upgrade)

    p_download = subparsers.add_parser("download", parents=[common], help="Download packages")
    p_download.add_argument("names", nargs="*", metavar="package")
    p_download.add_argument("--dest", "-d", metavar="DIR", help="Download directory")
    p_download.set_defaults(func=Dispatcher.download)

    p_freeze = subparsers.add_parser(
        "freeze", parents=[common], help="Output installed packages in requirements format"
    )
    p_freeze.set_defaults(func=Dispatcher.freeze)

    p_check = subparsers.add_parser("check", parents=[common], help="Check if packages are installed")
    p_check.add_argument("names", nargs="*", metavar="package")
    p_check.set_defaults(func=Dispatcher.check)

    # ------------------------
    # Index queries
    # ------------------------

    p_show = subparsers.add_parser("show", parents=[common], help="Show information about packages")
    p_show.add_argument("names", nargs="*", metavar="package")
    p_show.set_defaults(func=Dispatcher.show)

    p_search = subparsers.add_parser("search", parents=[common], help="Search for packages")
    p_search.add_argument("query")
    p_search.set_defaults(func=Dispatcher.search)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        sys.exit(1)

    try:
        config = Config()
        options = OperationConfig.from_args(args, config)
        set_verbosity(options.quiet, options.verbose)

        executor = SubprocessExecutor.discover(config)
        index = IndexClient(config)
        dispatcher = Dispatcher(executor, index, options)

        arg_dict = vars(args)
        for key in ("func", "command", *_GLOBAL_FLAGS):
            arg_dict.pop(key, None)

        func(dispatcher, **arg_dict)

    except KeyboardInterrupt:
        _logger.warning("Terminated by user (Ctrl+C). Exiting...")
        sys.exit(130)

    except SubprocessError as e:
        _logger.error(f"error: {e}")
        sys.exit(e.returncode or 1)

    except PeakPipError as e:
        _logger.error(f"error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
