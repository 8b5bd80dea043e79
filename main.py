"""Clash Verge directory resolver.

Usage:
    python main.py                          # Print the resolved layout as YAML
    python main.py --format json            # Same, as JSON
    python main.py --package-name verge     # Resolve resources for another package
    python main.py --verbose                # Debug logging on stderr
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

import yaml

from verge.core.app_meta import APP_DIR, APP_NAME, APP_VERSION
from verge.core.dirs import AppDirs, DirsError, get_app_version, reset_default
from verge.core.notifications import get_notifications
from verge.core.runtime_paths import PackageInfo

_logger = logging.getLogger(__name__)

DEFAULT_PACKAGE_NAME = "clash-verge"


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def init_dirs(package_name: str) -> AppDirs:
    """Run the startup sequence and install the result as the default context.

    The portable probe and resource resolution both happen here, once,
    before anything else asks for a path.
    """
    dirs = AppDirs.for_platform()
    dirs.init_portable_flag()
    dirs.app_resources_dir(PackageInfo(name=package_name, version=APP_VERSION))
    return reset_default(dirs)


def build_report(dirs: AppDirs) -> dict[str, Any]:
    return {
        "app": {
            "name": APP_NAME,
            "dir": dirs.app_dir,
            "version": get_app_version(),
        },
        "portable": dirs.get_portable_flag(),
        "portable_supported": dirs.portable_supported,
        "paths": dirs.snapshot(),
        "notifications": [
            {"level": n["level"], "message": n["message"]}
            for n in get_notifications()
        ],
    }


def render_report(report: dict[str, Any], fmt: str) -> str:
    if fmt == "json":
        return json.dumps(report, ensure_ascii=False, indent=2) + "\n"
    return yaml.safe_dump(report, allow_unicode=True, sort_keys=False)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description=f"{APP_NAME} ({APP_DIR}) directory resolver"
    )
    parser.add_argument(
        "--package-name",
        default=DEFAULT_PACKAGE_NAME,
        help="package name used to locate bundled resources",
    )
    parser.add_argument(
        "--format",
        choices=("yaml", "json"),
        default="yaml",
        help="output format",
    )
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    try:
        dirs = init_dirs(args.package_name)
    except DirsError as exc:
        _logger.debug("Startup failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(render_report(build_report(dirs), args.format), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
