# tests/run.py
"""
Manual end-to-end smoke run against a real pip and the live index.

Mutating verbs run with --dry-run so the current environment is left alone.
"""
import io
import sys
from contextlib import redirect_stdout

from peakpip import cli


# -----------------------------------------------------------
# Helper to run CLI commands
# -----------------------------------------------------------
def run(*args, expect_exit=None):
    """Run CLI command and capture stdout."""
    print(f"\033[36m[CMD]\033[0m peakpip {' '.join(args)}")

    buf = io.StringIO()
    code = 0
    try:
        with redirect_stdout(buf):
            cli.main(list(args))
    except SystemExit as e:
        code = e.code

    out = buf.getvalue()
    if out:
        print(out)
    if expect_exit is not None and code != expect_exit:
        raise AssertionError(f"expected exit {expect_exit}, got {code} for {args}")
    return out


def main():
    print("Starting peakpip smoke run...\n")

    # ====================================================
    # INDEX: show / search
    # ====================================================
    run("show", "requests", expect_exit=0)
    run("show", "requests", "tqdm", "--concurrent", "2", expect_exit=0)
    run("show", "nonexistent-package-xyz", expect_exit=1)  # invalid
    run("search", "requests", expect_exit=0)
    run("search", "nonexistent-package-xyz", expect_exit=0)

    # ====================================================
    # WRAPPED PIP: read-only
    # ====================================================
    run("list", "-q", expect_exit=0)
    run("list", "--outdated", "--dry-run", expect_exit=0)
    run("freeze", expect_exit=0)
    run("check", "pip", "nonexistent-package-xyz", expect_exit=0)

    # ====================================================
    # WRAPPED PIP: dry-run only
    # ====================================================
    run("install", "requests", "tqdm", "--dry-run", "--user", expect_exit=0)
    run("install", "-r", "requirements.txt", "--dry-run", expect_exit=0)
    run("uninstall", "requests", "--dry-run", expect_exit=0)
    run("upgrade", "pip", "--dry-run", expect_exit=0)
    run("download", "tqdm", "-d", "downloads", "--dry-run", expect_exit=0)
    run("uninstall", expect_exit=1)  # no names

    print("\033[32mAll smoke checks completed successfully.\033[0m")


if __name__ == "__main__":
    sys.exit(main())
