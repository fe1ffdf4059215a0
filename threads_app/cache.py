"""
Cache invalidation hook.

Actions call :func:`revalidate_path` after a successful write so the host
application can drop cached renders of that route. The registry only records
stale paths and fans them out to listeners; it never raises back into the
action that triggered it.
"""
import logging
from typing import Callable, List, Set

logger = logging.getLogger(__name__)

Listener = Callable[[str], None]

_listeners: List[Listener] = []
_stale: Set[str] = set()


def subscribe(listener: Listener) -> Listener:
    """Register ``listener`` to be called with every revalidated path."""
    if listener not in _listeners:
        _listeners.append(listener)
    return listener


def unsubscribe(listener: Listener) -> None:
    if listener in _listeners:
        _listeners.remove(listener)


def revalidate_path(path: str) -> None:
    """Mark cached renders of ``path`` as stale."""
    if not path:
        return
    _stale.add(path)
    logger.debug("Revalidate %s", path)
    for listener in list(_listeners):
        try:
            listener(path)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Cache listener %r failed for %s: %s", listener, path, exc)


def stale_paths() -> Set[str]:
    return set(_stale)


def clear() -> None:
    _stale.clear()
    _listeners.clear()
