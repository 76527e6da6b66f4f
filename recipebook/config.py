from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


@dataclass(frozen=True)
class Settings:
    """Runtime configuration, read from the environment at startup.

    Store credentials are deliberately absent: the Firestore client picks up
    Application Default Credentials (``GOOGLE_APPLICATION_CREDENTIALS``) or
    ``FIRESTORE_EMULATOR_HOST`` on its own.
    """

    gcp_project: Optional[str] = None
    firestore_database: Optional[str] = None
    collection_name: str = "recipes"
    store_timeout: float = 10.0
    seed_file: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        raw_timeout = env.get("RECIPES_STORE_TIMEOUT", "10")
        try:
            store_timeout = float(raw_timeout)
        except ValueError:
            raise ValueError(f"RECIPES_STORE_TIMEOUT must be a number, got {raw_timeout!r}") from None
        if store_timeout <= 0:
            raise ValueError("RECIPES_STORE_TIMEOUT must be positive")

        return cls(
            gcp_project=env.get("GCP_PROJECT") or None,
            firestore_database=env.get("FIRESTORE_DATABASE") or None,
            collection_name=env.get("RECIPES_COLLECTION", "recipes"),
            store_timeout=store_timeout,
            seed_file=env.get("RECIPES_SEED_FILE") or None,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )


__all__ = ["Settings"]
