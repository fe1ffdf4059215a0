from datetime import datetime
from typing import TYPE_CHECKING, List, Optional, Union

from pydantic import Field

from ..firestore_model import BaseFirestoreModel, utcnow

if TYPE_CHECKING:
    from .thread import Thread
    from .user import User


class Community(BaseFirestoreModel):
    class Settings:
        name = "communities"

    external_id: str
    username: str
    name: str
    image: Optional[str] = None
    bio: Optional[str] = None
    created_by: Optional[Union[str, "User"]] = None
    threads: List[Union[str, "Thread"]] = Field(default_factory=list)
    members: List[Union[str, "User"]] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
