"""Document serialization — domain objects to engine-safe JSON primitives.

Identifiers become their canonical string form and dates become ISO-8601
strings, at any depth.  A new structure is always returned; the input is
left untouched.

``IDENTIFIER_TYPES`` defaults to ``uuid.UUID``, which renders hyphenated.
A MongoDB-backed document layer passes ``(bson.ObjectId,)`` so ids index as
their 24-character hex string.
"""

from __future__ import annotations

import dataclasses
import uuid
from collections.abc import Mapping
from datetime import date
from typing import Any

from pydantic import BaseModel

from searchsync.exceptions import ConfigurationError
from searchsync.models.connection import ConnectionOptions

IDENTIFIER_TYPES: tuple[type, ...] = (uuid.UUID,)


def serialize(thing: Any, identifier_types: tuple[type, ...] = IDENTIFIER_TYPES) -> Any:
    """Deep-convert identifiers to strings and dates to ISO strings.

    Args:
        thing: Any value: list, tuple, mapping, identifier, date or scalar.
        identifier_types: Types rendered with ``str()``.  Pass e.g.
            ``(bson.ObjectId,)`` for a MongoDB-backed document layer.

    Returns:
        The serialized value.
    """
    if isinstance(thing, (list, tuple)):
        return [serialize(item, identifier_types) for item in thing]
    if isinstance(thing, identifier_types):
        return str(thing)
    if isinstance(thing, date):
        # datetime is a date subclass
        return thing.isoformat()
    if isinstance(thing, Mapping):
        return {key: serialize(value, identifier_types) for key, value in thing.items()}
    return thing


def flatten(thing: Any, key: Any) -> dict[str, Any]:
    """Nest ``thing`` under ``key`` so each group lands in its own field."""
    return {f"{key}": thing}


def to_mapping(doc: Any) -> dict[str, Any]:
    """Convert a domain object to a plain mapping.

    Raises:
        ConfigurationError: If ``doc`` is none of the supported shapes.
    """
    if isinstance(doc, BaseModel):
        return doc.model_dump(by_alias=True)
    if dataclasses.is_dataclass(doc) and not isinstance(doc, type):
        return dataclasses.asdict(doc)
    if isinstance(doc, Mapping):
        return dict(doc)
    to_dict = getattr(doc, "to_dict", None)
    if callable(to_dict):
        return dict(to_dict())
    raise ConfigurationError(f"Cannot serialize document of type {type(doc).__name__}")


def serialize_model(
    doc: Any,
    options: ConnectionOptions,
    identifier_types: tuple[type, ...] = IDENTIFIER_TYPES,
) -> dict[str, Any]:
    """Serialize a domain object for indexing.

    When both ``options.flatten`` and ``options.grouper`` are set, the
    ``flatten`` field is replaced by ``{<grouper value>: <flatten value>}``
    so that sub-documents of different groups index as distinct fields.
    """
    serialized = serialize(to_mapping(doc), identifier_types)
    if options.flatten and options.grouper:
        serialized[options.flatten] = flatten(serialized.get(options.flatten), serialized.get(options.grouper))
    return serialized
