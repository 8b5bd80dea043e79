"""Application directory resolution.

Every location the application reads or writes is derived here from two
pieces of process state: the bundled resource directory and the portable
flag. Both live on an :class:`AppDirs` context that the host creates during
startup, before any worker thread exists, and shares with the subsystems
that need paths. The module-level functions operate on a process default
context for callers that are not handed one explicitly.

Installed layout::

    ~/.config/<app dir>/{config.yaml, verge.yaml, profiles.yaml, storage,
                         profiles/, logs/, logs/service/}

Portable layout uses ``<exe dir>/.config/<app dir>`` instead. Portable mode
is switched on by the existence of ``<exe dir>/.config/PORTABLE`` and only
exists on Windows.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from verge.core import runtime_paths
from verge.core.app_meta import APP_DIR, APP_VERSION
from verge.core.notifications import push_notification
from verge.core.runtime_paths import PackageInfo

_logger = logging.getLogger(__name__)

CLASH_CONFIG = "config.yaml"
VERGE_CONFIG = "verge.yaml"
PROFILE_YAML = "profiles.yaml"
STORAGE_DB = "storage"
PROFILES_DIR = "profiles"
LOGS_DIR = "logs"
SERVICE_LOG_DIR = "service"
RESOURCES_DIR = "resources"
CLASH_PID = "clash.pid"
SERVICE_EXE = "clash-verge-service.exe"
PORTABLE_MARKER = Path(".config") / "PORTABLE"
SERVICE_LOG_TIME_FORMAT = "%Y-%m-%d-%H%M"


class DirsError(Exception):
    """Base class for directory resolution failures."""


class DirNotFoundError(DirsError, LookupError):
    """A directory the platform should provide could not be determined."""


class PathEncodingError(DirsError, UnicodeError):
    """A path cannot be represented as valid text."""


class DirsIOError(DirsError, OSError):
    """A filesystem probe or canonicalization failed."""


def _platform_portable() -> bool | None:
    return False if sys.platform == "win32" else None


@dataclass
class AppDirs:
    """Host-owned directory context.

    ``portable`` is None on platforms without portable mode. ``resource_dir``
    stays None until :meth:`set_resource_dir` or :meth:`app_resources_dir`
    runs. The provider callables are the host platform hooks.
    """

    app_dir: str = APP_DIR
    portable: bool | None = None
    resource_dir: Path | None = None
    home_provider: Callable[[], Path | None] = field(
        default=runtime_paths.home_dir, repr=False
    )
    exe_provider: Callable[[], Path] = field(default=runtime_paths.current_exe, repr=False)
    canonicalize: Callable[[Path], Path] = field(
        default=runtime_paths.canonicalize, repr=False
    )
    bundle_provider: Callable[[PackageInfo], Path | None] = field(
        default=runtime_paths.resource_dir, repr=False
    )
    clock: Callable[[], datetime] = field(default=datetime.now, repr=False)

    @classmethod
    def for_platform(cls, **kwargs) -> AppDirs:
        """Create a context with portable support decided by the running OS."""
        kwargs.setdefault("portable", _platform_portable())
        return cls(**kwargs)

    @property
    def portable_supported(self) -> bool:
        return self.portable is not None

    # --- initialization ---

    def init_portable_flag(self) -> bool | None:
        """Probe for the portable sentinel next to the executable.

        Returns the resulting flag. Safe to call repeatedly; the flag only
        ever moves from False to True.
        """
        if self.portable is None:
            return None

        try:
            exe = self.exe_provider()
        except OSError as exc:
            raise DirsIOError(f"failed to get the current executable: {exc}") from exc

        marker = exe.parent / PORTABLE_MARKER
        try:
            found = marker.exists()
        except OSError as exc:
            raise DirsIOError(f"failed to probe {marker}: {exc}") from exc
        if found:
            if not self.portable:
                _logger.info("Portable mode enabled by %s", marker)
            self.portable = True
        return self.portable

    def set_resource_dir(self, path: str | os.PathLike[str]) -> None:
        self.resource_dir = Path(path)
        _logger.debug("Resource dir set to %s", self.resource_dir)

    # --- state ---

    def get_resource_dir(self) -> Path | None:
        return self.resource_dir

    def get_portable_flag(self) -> bool:
        return bool(self.portable)

    # --- home tree ---

    def app_home_dir(self) -> Path:
        """Return the writable application home for the current mode."""
        if self.portable:
            try:
                app_exe = self.canonicalize(self.exe_provider())
            except OSError as exc:
                raise DirsIOError(f"failed to get the portable app dir: {exc}") from exc
            base = app_exe.parent
        else:
            base = self.home_provider()
            if base is None:
                raise DirNotFoundError("failed to get the app home dir")
        return base / ".config" / self.app_dir

    def app_profiles_dir(self) -> Path:
        return self.app_home_dir() / PROFILES_DIR

    def app_logs_dir(self) -> Path:
        return self.app_home_dir() / LOGS_DIR

    def clash_path(self) -> Path:
        return self.app_home_dir() / CLASH_CONFIG

    def verge_path(self) -> Path:
        return self.app_home_dir() / VERGE_CONFIG

    def profiles_path(self) -> Path:
        return self.app_home_dir() / PROFILE_YAML

    def storage_path(self) -> Path:
        return self.app_home_dir() / STORAGE_DB

    # --- resource tree ---

    def app_resources_dir(self, package_info: PackageInfo) -> Path:
        """Resolve the bundle resource directory and cache it."""
        try:
            bundle_dir = self.bundle_provider(package_info)
        except OSError as exc:
            raise DirsIOError(f"failed to get the resource dir: {exc}") from exc
        if bundle_dir is None:
            raise DirNotFoundError(
                f"failed to get the resource dir for package {package_info.name!r}"
            )

        res_dir = Path(bundle_dir) / RESOURCES_DIR
        self.set_resource_dir(res_dir)
        return res_dir

    def app_res_dir(self) -> Path:
        if self.resource_dir is None:
            raise DirNotFoundError("failed to get the resource dir")
        return self.resource_dir

    def clash_pid_path(self) -> Path:
        return self.app_res_dir() / CLASH_PID

    def service_path(self) -> Path:
        """Path of the Windows service helper executable."""
        return self.app_res_dir() / SERVICE_EXE

    def service_log_file(self) -> Path:
        """Return a fresh per-run service log file path.

        The ``logs/service`` folder is created on a best-effort basis: a
        failure is reported through the notifications store and the path is
        returned anyway, so the writer surfaces any real error itself.
        """
        log_dir = self.app_logs_dir() / SERVICE_LOG_DIR
        log_file = log_dir / f"{self.clock().strftime(SERVICE_LOG_TIME_FORMAT)}.log"

        try:
            log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            push_notification(
                f"Could not create service log dir {log_dir}: {exc}",
                level="warning",
                source=__name__,
            )
        return log_file

    # --- reporting ---

    def snapshot(self) -> dict[str, str | None]:
        """Return every named location as text, None where it cannot resolve."""
        accessors: dict[str, Callable[[], Path]] = {
            "home_dir": self.app_home_dir,
            "profiles_dir": self.app_profiles_dir,
            "logs_dir": self.app_logs_dir,
            "clash_config": self.clash_path,
            "verge_config": self.verge_path,
            "profiles_index": self.profiles_path,
            "storage": self.storage_path,
            "resource_dir": self.app_res_dir,
            "clash_pid": self.clash_pid_path,
            "service_exe": self.service_path,
        }

        result: dict[str, str | None] = {}
        for name, accessor in accessors.items():
            try:
                result[name] = path_to_str(accessor())
            except DirsError as exc:
                _logger.warning("Unable to resolve %s: %s", name, exc)
                result[name] = None
        return result


def path_to_str(path: str | os.PathLike[str] | bytes) -> str:
    """Return the text form of *path*, refusing lossy conversions."""
    raw = os.fspath(path)
    if isinstance(raw, bytes):
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise PathEncodingError(f"failed to get path from {raw!r}") from exc

    # Undecodable bytes surface as lone surrogates (surrogateescape).
    try:
        raw.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise PathEncodingError(f"failed to get path from {raw!r}") from exc
    return raw


def get_app_version() -> str:
    return APP_VERSION


_default = AppDirs.for_platform()


def default_dirs() -> AppDirs:
    """Return the process default context."""
    return _default


def reset_default(dirs: AppDirs | None = None) -> AppDirs:
    """Replace the process default context, returning the new one."""
    global _default
    _default = dirs if dirs is not None else AppDirs.for_platform()
    return _default


def init_portable_flag() -> bool | None:
    return _default.init_portable_flag()


def get_portable_flag() -> bool:
    return _default.get_portable_flag()


def set_resource_dir(path: str | os.PathLike[str]) -> None:
    _default.set_resource_dir(path)


def get_resource_dir() -> Path | None:
    return _default.get_resource_dir()


def app_home_dir() -> Path:
    return _default.app_home_dir()


def app_resources_dir(package_info: PackageInfo) -> Path:
    return _default.app_resources_dir(package_info)


def app_profiles_dir() -> Path:
    return _default.app_profiles_dir()


def app_logs_dir() -> Path:
    return _default.app_logs_dir()


def clash_path() -> Path:
    return _default.clash_path()


def verge_path() -> Path:
    return _default.verge_path()


def profiles_path() -> Path:
    return _default.profiles_path()


def storage_path() -> Path:
    return _default.storage_path()


def app_res_dir() -> Path:
    return _default.app_res_dir()


def clash_pid_path() -> Path:
    return _default.clash_pid_path()


def service_path() -> Path:
    return _default.service_path()


def service_log_file() -> Path:
    return _default.service_log_file()
