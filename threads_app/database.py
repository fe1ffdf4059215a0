"""Shared Firestore connection used by the server actions."""
import logging
from typing import Iterable, Optional, Type

from .firestore_client import FirestoreDB
from .firestore_model import BaseFirestoreModel
from .models import DOCUMENT_MODELS
from .settings import get_settings

logger = logging.getLogger(__name__)

_connection: Optional[FirestoreDB] = None


def init_models(database: FirestoreDB, document_models: Iterable[Type[BaseFirestoreModel]]) -> None:
    for model in document_models:
        model.initialize_db(database)
        model.initialize_fields()


def init_threads_app(database: FirestoreDB) -> FirestoreDB:
    """Register ``database`` with every document model and make it the shared connection."""
    global _connection
    init_models(database, DOCUMENT_MODELS)
    _connection = database
    return database


def connect_to_db() -> FirestoreDB:
    """
    Return the shared connection, creating it from settings on first use.

    Safe to call at the start of every action.
    """
    if _connection is not None:
        return _connection
    database = FirestoreDB.from_settings(get_settings())
    logger.info("Connected to Firestore project %s", database.project_id)
    return init_threads_app(database)


def reset_connection() -> None:
    """Forget the shared connection; the next :func:`connect_to_db` reconnects."""
    global _connection
    _connection = None
