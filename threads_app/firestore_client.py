import os
import logging
from typing import Optional

from google.cloud.firestore_v1 import AsyncClient

from .settings import Settings

logger = logging.getLogger(__name__)


class FirestoreDB:
    """
    Owner of the Firestore :class:`google.cloud.firestore_v1.AsyncClient`
    shared by every threads document model.

    The same object can point to:

    * **A local Firestore emulator** – local development and CI.
    * **The real Firestore backend** – default when no emulator host is set.
    * **A substitute client** – a mock or in-memory fake for unit tests.
    """

    def __init__(
        self,
        project_id: str,
        database: Optional[str] = None,
        credentials=None,
        emulator_host: Optional[str] = None,
    ):
        """
        Parameters
        ----------
        project_id :
            Google Cloud project identifier.
        database :
            Optional Firestore **database ID** (defaults to the default database).
        credentials :
            Explicit credentials object; if *None*, the Google SDK default
            credentials chain is used.
        emulator_host :
            ``host:port`` of a running **Firestore emulator**. When provided,
            the client talks to the emulator instead of production.
        """
        self.project_id = project_id
        self.database = database
        self.credentials = credentials
        self._emulator_host = emulator_host

        self.client: AsyncClient = self._init_client()

    @classmethod
    def from_settings(cls, settings: Settings, credentials=None) -> "FirestoreDB":
        """Build a connection from :class:`~threads_app.settings.Settings`."""
        if not settings.project_id:
            raise RuntimeError("GOOGLE_CLOUD_PROJECT must be set to connect to Firestore.")
        return cls(
            project_id=settings.project_id,
            database=settings.database,
            credentials=credentials,
            emulator_host=settings.emulator_host,
        )

    def _init_client(self) -> AsyncClient:
        # The Google client libraries only honour the emulator through the
        # FIRESTORE_EMULATOR_HOST variable.
        if self._emulator_host:
            os.environ["FIRESTORE_EMULATOR_HOST"] = self._emulator_host
            logger.info("Using Firestore emulator on %s", self._emulator_host)
        else:
            os.environ.pop("FIRESTORE_EMULATOR_HOST", None)
        return AsyncClient(
            project=self.project_id,
            database=self.database,
            credentials=self.credentials,
        )

    @property
    def emulator_host(self) -> Optional[str]:
        return self._emulator_host

    def use_emulator(self, host: str = "localhost:8080"):
        """Switch to a **local emulator** and recreate the client."""
        self._emulator_host = host
        self.client = self._init_client()
        logger.info("Emulator enabled on %s", host)

    def clear_emulator(self):
        """Disable the emulator and reconnect to production Firestore."""
        self._emulator_host = None
        self.client = self._init_client()
        logger.info("Emulator disabled – using real Firestore.")

    def use_client(self, client) -> None:
        """
        Replace the underlying client, e.g. with a
        :class:`unittest.mock.MagicMock` or an in-memory fake, so unit tests
        never touch the network.
        """
        self.client = client
        logger.info("Firestore client replaced with %s", type(client).__name__)
