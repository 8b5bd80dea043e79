"""Application identity and version, fixed when the build is produced."""

from __future__ import annotations

from verge.core import _build_info


APP_NAME = "Clash Verge"
DEV_FEATURE = "verge-dev"

BUILD_FEATURES = _build_info.FEATURES
APP_DIR = "clash-verge-dev" if DEV_FEATURE in BUILD_FEATURES else "clash-verge"
APP_VERSION = _build_info.VERSION
