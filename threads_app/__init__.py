from .firestore_model import BaseFirestoreModel
from .firestore_fields import FirestoreField
from .firestore_client import FirestoreDB
from .enums import FirestoreOperators, OrderByDirection
from .errors import ActionError, ThreadNotFoundError
from .population import Populate
from .models import Community, Thread, User
from .database import connect_to_db, init_models, init_threads_app, reset_connection
from .cache import revalidate_path
from .session import auth_session, current_user_id
from .layout import RootLayout

__all__ = [
    "BaseFirestoreModel",
    "FirestoreField",
    "FirestoreDB",
    "FirestoreOperators",
    "OrderByDirection",
    "ActionError",
    "ThreadNotFoundError",
    "Populate",
    "Community",
    "Thread",
    "User",
    "connect_to_db",
    "init_models",
    "init_threads_app",
    "reset_connection",
    "revalidate_path",
    "auth_session",
    "current_user_id",
    "RootLayout",
]
