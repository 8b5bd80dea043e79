"""Build-stamped values. The release build rewrites this file."""

FEATURES: frozenset[str] = frozenset()
VERSION = "1.3.8"
