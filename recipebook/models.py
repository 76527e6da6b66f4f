from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from .errors import InvalidRequest

# A recipe line is either plain text or a structured record such as
# {"quantity": "2 dl", "item": "milk"}.
RecipeItem = Union[str, Dict[str, Any]]

TEXT_FIELDS = ("name", "title", "description", "image")
LIST_FIELDS = ("ingredients", "preparation")
RECIPE_FIELDS = ("name", "title", "date", "description", "image", "ingredients", "preparation")


@dataclass
class Recipe:
    """Domain object representing a stored recipe."""

    id: str
    name: Optional[str] = None
    title: Optional[str] = None
    date: Optional[datetime] = None
    description: Optional[str] = None
    image: Optional[str] = None
    ingredients: List[RecipeItem] = field(default_factory=list)
    preparation: List[RecipeItem] = field(default_factory=list)
    created_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc_id: str, data: Mapping[str, Any]) -> "Recipe":
        """Build a recipe from a stored document, tolerating missing fields."""

        date = data.get("date")
        created_at = data.get("created_at")
        return cls(
            id=doc_id,
            name=data.get("name"),
            title=data.get("title"),
            date=date if isinstance(date, datetime) else None,
            description=data.get("description"),
            image=data.get("image"),
            ingredients=list(data.get("ingredients") or []),
            preparation=list(data.get("preparation") or []),
            created_at=created_at if isinstance(created_at, datetime) else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "title": self.title,
            "date": _isoformat(self.date),
            "description": self.description,
            "image": self.image,
            "ingredients": list(self.ingredients),
            "preparation": list(self.preparation),
            "created_at": _isoformat(self.created_at),
        }


def parse_recipe_fields(payload: Any) -> Dict[str, Any]:
    """Coerce the recipe fields present in ``payload`` to their storage types.

    Only keys that appear in the payload are returned, so the result can be
    used both for creating a document and for a merge update. Unknown keys
    and ``id`` are dropped. No field is required.
    """

    if not isinstance(payload, Mapping):
        raise InvalidRequest("Recipe payload must be a JSON object.")

    fields: Dict[str, Any] = {}
    for name in RECIPE_FIELDS:
        if name not in payload:
            continue
        value = payload[name]
        if name in TEXT_FIELDS:
            fields[name] = _coerce_text(name, value)
        elif name in LIST_FIELDS:
            fields[name] = _coerce_items(name, value)
        else:
            fields[name] = _coerce_date(value)
    return fields


def _coerce_text(name: str, value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise InvalidRequest(f"Field '{name}' must be text.")


def _coerce_date(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidRequest("Field 'date' must be an ISO-8601 string or a timestamp.")
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        # Numeric dates are milliseconds since the epoch.
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise InvalidRequest("Field 'date' is out of range.") from exc
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise InvalidRequest(f"Field 'date' is not a valid date: {value!r}.") from exc
    else:
        raise InvalidRequest("Field 'date' must be an ISO-8601 string or a timestamp.")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _coerce_items(name: str, value: Any) -> List[RecipeItem]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        value = [value]

    items: List[RecipeItem] = []
    for item in value:
        if isinstance(item, str):
            items.append(item)
        elif isinstance(item, Mapping):
            items.append(dict(item))
        elif isinstance(item, bool):
            items.append("true" if item else "false")
        elif isinstance(item, (int, float)):
            items.append(str(item))
        else:
            raise InvalidRequest(f"Items in '{name}' must be text or objects.")
    return items


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


__all__ = ["Recipe", "RecipeItem", "RECIPE_FIELDS", "parse_recipe_fields"]
