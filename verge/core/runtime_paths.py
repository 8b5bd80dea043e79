"""Runtime path helpers for source and frozen execution modes."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path


SOURCE_ROOT = Path(__file__).resolve().parent.parent.parent


@dataclass(frozen=True, slots=True)
class PackageInfo:
    """Package metadata used to locate the bundled resource tree."""

    name: str
    version: str = ""


def home_dir() -> Path | None:
    """Return the current user's home directory, or None if unknown."""
    try:
        return Path.home()
    except (RuntimeError, KeyError, OSError):
        return None


def current_exe() -> Path:
    """Return the path of the running application executable.

    Frozen builds report the bundled executable. Source runs report the
    entry script, falling back to the interpreter when there is none
    (``python -c`` or an interactive session).
    """
    if getattr(sys, "frozen", False):
        candidate = sys.executable
    else:
        script = sys.argv[0] if sys.argv else ""
        candidate = script if script and script != "-c" else sys.executable

    if not candidate:
        raise FileNotFoundError("unable to determine the current executable path")
    return Path(candidate).absolute()


def canonicalize(path: Path) -> Path:
    """Resolve symlinks and relative parts; the path must exist."""
    try:
        return Path(path).resolve(strict=True)
    except RuntimeError as exc:
        # Symlink loops raise RuntimeError before Python 3.13.
        raise OSError(f"cannot canonicalize {path}: {exc}") from exc


def get_bundle_root() -> Path:
    """Return base directory containing bundled read-only assets."""
    if getattr(sys, "frozen", False):
        meipass = getattr(sys, "_MEIPASS", None)
        if meipass:
            return Path(meipass)
        return Path(sys.executable).resolve().parent
    return SOURCE_ROOT


def resource_dir(package_info: PackageInfo, exe: Path | None = None) -> Path | None:
    """Return the platform bundle resource directory for *package_info*.

    Linux installs outside an AppImage read from ``/usr/lib/<package>``,
    except when run from an unpacked ``usr/bin`` tree, which reads from its
    sibling ``usr/lib/<package>``. Returns None when the layout cannot be
    determined.
    """
    if not package_info.name:
        return None

    if exe is None:
        if not getattr(sys, "frozen", False):
            return SOURCE_ROOT
        exe = current_exe()

    exe_dir = exe.parent
    if exe_dir == exe:
        return None

    # Foo.app/Contents/MacOS/foo -> Foo.app/Contents/Resources
    if exe_dir.name == "MacOS" and exe_dir.parent.name == "Contents":
        return exe_dir.parent / "Resources"

    if sys.platform.startswith("linux"):
        appdir = os.environ.get("APPDIR")
        if appdir and exe.is_relative_to(appdir):
            return Path(appdir) / "usr" / "lib" / package_info.name
        if exe_dir.name == "bin" and exe_dir.parent.name == "usr":
            return exe_dir.parent / "lib" / package_info.name
        return Path("/usr/lib") / package_info.name

    if getattr(sys, "frozen", False):
        return get_bundle_root()
    return exe_dir
