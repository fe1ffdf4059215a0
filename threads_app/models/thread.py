from datetime import datetime
from typing import TYPE_CHECKING, List, Optional, Union

from pydantic import Field

from ..firestore_model import BaseFirestoreModel, utcnow

if TYPE_CHECKING:
    from .community import Community
    from .user import User


class Thread(BaseFirestoreModel):
    """
    A post. Top-level threads have no ``parent_id``; replies point at the
    thread they answer and are listed in that thread's ``children``.
    """

    class Settings:
        name = "threads"

    text: str
    author: Union[str, "User"]
    community: Optional[Union[str, "Community"]] = None
    parent_id: Optional[str] = None
    children: List[Union[str, "Thread"]] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def is_reply(self) -> bool:
        return self.parent_id is not None
