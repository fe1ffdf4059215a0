from datetime import datetime
from typing import TYPE_CHECKING, List, Optional, Union

from pydantic import Field

from ..firestore_model import BaseFirestoreModel, utcnow

if TYPE_CHECKING:
    from .community import Community
    from .thread import Thread


class User(BaseFirestoreModel):
    """A member of the site, keyed by the auth provider's user id."""

    class Settings:
        name = "users"

    external_id: str
    username: str
    name: str
    image: Optional[str] = None
    bio: Optional[str] = None
    onboarded: bool = False
    threads: List[Union[str, "Thread"]] = Field(default_factory=list)
    communities: List[Union[str, "Community"]] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
