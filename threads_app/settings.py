"""Runtime configuration for the threads backend.

Values come from environment variables (or a ``.env`` file). The Firestore
variables keep the names used by the Google SDK and the emulator tooling so
the same shell environment drives both.
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed settings loaded from the environment."""

    # Firestore
    project_id: Optional[str] = Field(default=None, alias="GOOGLE_CLOUD_PROJECT")
    database: Optional[str] = Field(default=None, alias="DATABASE")
    emulator_host: Optional[str] = Field(default=None, alias="FIRESTORE_EMULATOR_HOST")

    # Feeds
    page_size: int = Field(default=20, alias="THREADS_PAGE_SIZE")
    profile_edit_path: str = Field(default="/profile/edit", alias="THREADS_PROFILE_EDIT_PATH")

    # Page shell
    app_title: str = Field(default="Threads", alias="THREADS_APP_TITLE")
    app_description: str = Field(
        default="A Meta Threads style application",
        alias="THREADS_APP_DESCRIPTION",
    )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)


@lru_cache
def get_settings() -> Settings:
    return Settings()
