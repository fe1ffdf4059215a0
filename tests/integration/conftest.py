"""
Fixtures for integration tests against the Firestore emulator.

The whole directory is skipped unless ``FIRESTORE_EMULATOR_HOST`` is set,
e.g. ``FIRESTORE_EMULATOR_HOST=localhost:8080``.
"""
import logging
import os

import httpx
import pytest
import pytest_asyncio

from threads_app import FirestoreDB, database, init_threads_app

logger = logging.getLogger(__name__)

EMULATOR_HOST = os.environ.get("FIRESTORE_EMULATOR_HOST", "").strip()
DATABASE = os.environ.get("DATABASE", None) or None
PROJECT_ID = os.environ.get("GOOGLE_CLOUD_PROJECT") or "test-project"

IS_EMULATOR = bool(EMULATOR_HOST)


def pytest_collection_modifyitems(config, items):
    if IS_EMULATOR:
        return
    skip = pytest.mark.skip(reason="FIRESTORE_EMULATOR_HOST is not set")
    for item in items:
        if "integration" in item.nodeid:
            item.add_marker(skip)


@pytest.fixture()
def firestore_db():
    """
    Function-scoped so each test gets a fresh AsyncClient bound to the
    current event loop (avoids 'Event loop is closed' with gRPC).
    """
    db = FirestoreDB(project_id=PROJECT_ID, database=DATABASE, emulator_host=EMULATOR_HOST)
    init_threads_app(db)
    yield db
    database.reset_connection()


@pytest.fixture()
def raw_client(firestore_db):
    """Raw AsyncClient pointing to the same backend as the models."""
    return firestore_db.client


@pytest_asyncio.fixture(autouse=True)
async def clean_firestore():
    """Wipe the emulator BEFORE and AFTER each test."""
    await _wipe_emulator()
    yield
    await _wipe_emulator()


async def _wipe_emulator():
    db_name = DATABASE or "(default)"
    url = (
        f"http://{EMULATOR_HOST}/emulator/v1/projects/"
        f"{PROJECT_ID}/databases/{db_name}/documents"
    )
    async with httpx.AsyncClient() as client:
        await client.delete(url)
