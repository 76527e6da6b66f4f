"""Sources of the fixed record set inserted by the import operation."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Protocol, Union

from .errors import SeedError


class SeedProvider(Protocol):
    def load(self) -> List[Mapping[str, Any]]:
        """Return the raw recipe payloads to import, in import order."""


class StaticSeedProvider:
    """Seed held in memory. Every load returns fresh copies of the records."""

    def __init__(self, records: Iterable[Mapping[str, Any]]) -> None:
        self._records = [dict(record) for record in records]

    def load(self) -> List[Dict[str, Any]]:
        return [dict(record) for record in self._records]


class JsonFileSeedProvider:
    """Seed read from a JSON file on every import.

    The file holds either an array of recipe objects or an object with a
    ``"recipes"`` array.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def load(self) -> List[Mapping[str, Any]]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise SeedError(f"Cannot read seed file {self.path}: {exc.strerror or exc}") from exc
        except ValueError as exc:
            raise SeedError(f"Seed file {self.path} is not valid JSON: {exc}") from exc

        if isinstance(raw, dict):
            raw = raw.get("recipes")
        if not isinstance(raw, list):
            raise SeedError(f"Seed file {self.path} must contain a list of recipes.")

        for position, record in enumerate(raw):
            if not isinstance(record, dict):
                raise SeedError(f"Seed record #{position} in {self.path} is not an object.")
        return raw


__all__ = ["JsonFileSeedProvider", "SeedProvider", "StaticSeedProvider"]
