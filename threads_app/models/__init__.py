from .community import Community
from .thread import Thread
from .user import User

# Resolve the cross-module forward references.
User.model_rebuild()
Thread.model_rebuild()
Community.model_rebuild()

DOCUMENT_MODELS = [User, Thread, Community]

__all__ = ["Community", "Thread", "User", "DOCUMENT_MODELS"]
