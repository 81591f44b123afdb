"""Conversions between MongoDB documents and JSON-ready dictionaries."""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from bson.errors import InvalidId

from service.handlers.utils.errors import NotFoundError


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_object_id(value: str, message: str = 'Recurso no encontrado') -> ObjectId:
    """Parse a hex id; malformed ids cannot exist so they read as not found."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as exc:
        raise NotFoundError(message) from exc


def optional_object_id(value: Optional[str]) -> Optional[ObjectId]:
    return ObjectId(value) if value else None


def serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    if isinstance(value, dict):
        return serialize_document(value)
    if isinstance(value, list):
        return [serialize_value(item) for item in value]
    return value


def serialize_document(document: Dict[str, Any]) -> Dict[str, Any]:
    """Rename ``_id`` to ``id`` and stringify ObjectIds and datetimes."""
    result: Dict[str, Any] = {}
    for key, value in document.items():
        result['id' if key == '_id' else key] = serialize_value(value)
    return result


def serialize_documents(documents: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [serialize_document(document) for document in documents]
