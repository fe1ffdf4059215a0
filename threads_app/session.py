"""
Authenticated identity for the current request.

The auth provider resolves who is calling; the page shell binds that id for
the duration of a render with :func:`auth_session` and anything below it can
read it back with :func:`current_user_id`.
"""
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

_current_user: ContextVar[Optional[str]] = ContextVar("threads_current_user", default=None)


@contextmanager
def auth_session(user_id: Optional[str]) -> Iterator[Optional[str]]:
    token = _current_user.set(user_id)
    try:
        yield user_id
    finally:
        _current_user.reset(token)


def current_user_id() -> Optional[str]:
    return _current_user.get()
