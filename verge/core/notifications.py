"""In-memory store of startup diagnostics.

Path resolution never fails silently, but a few failures are soft: the
caller still gets a usable path. The ``logs/service`` folder that could not
be created is the main case. Such failures are recorded here, tagged with
the module that raised them, so the GUI shell can list them after startup.
Each one is mirrored to ``logging`` as well.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import asdict, dataclass, field
from typing import Any

_logger = logging.getLogger(__name__)

_MAX_NOTIFICATIONS = 50
_LOG_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
}


@dataclass(slots=True)
class Notification:
    level: str  # "warning" | "error" | "info"
    message: str
    source: str = ""  # dotted module name, e.g. "verge.core.dirs"
    timestamp: float = field(default_factory=time.time)


_lock = threading.Lock()
_store: list[Notification] = []


def push_notification(message: str, *, level: str = "warning", source: str = "") -> None:
    """Record a soft failure such as an uncreatable service log folder.

    Only the newest entries are kept. The message is logged at the level
    matching *level*, falling back to WARNING for unknown levels.
    """
    entry = Notification(level=level, message=message, source=source)

    with _lock:
        _store.append(entry)
        if len(_store) > _MAX_NOTIFICATIONS:
            del _store[:-_MAX_NOTIFICATIONS]

    _logger.log(_LOG_LEVELS.get(level, logging.WARNING), "%s", message)


def get_notifications(*, source: str | None = None, clear: bool = False) -> list[dict[str, Any]]:
    """Return stored diagnostics as plain dicts, oldest first.

    *source* limits the result to one module's entries. *clear* empties the
    whole store after reading.
    """
    with _lock:
        items = [asdict(n) for n in _store if source is None or n.source == source]
        if clear:
            _store.clear()
    return items
