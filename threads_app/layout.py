from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .session import auth_session
from .settings import Settings, get_settings

T = TypeVar("T")


@dataclass(frozen=True)
class PageMetadata:
    title: str
    description: str


class RootLayout:
    """
    Outer shell for every page: carries the site metadata and renders its
    children inside the caller's auth session.
    """

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.metadata = PageMetadata(title=settings.app_title, description=settings.app_description)

    async def render(
        self,
        children: Callable[..., Awaitable[T]],
        user_id: Optional[str] = None,
        **kwargs: Any,
    ) -> T:
        with auth_session(user_id):
            return await children(**kwargs)
