"""Document serialization for indexing."""

from searchsync.serialization.serializer import flatten, serialize, serialize_model

__all__ = ["flatten", "serialize", "serialize_model"]
