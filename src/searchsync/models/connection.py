"""Connection option models — where and how to reach the search engine."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    """HTTP basic-auth credentials."""

    model_config = ConfigDict(frozen=True)

    user: str = Field(description="Basic-auth username")
    password: str = Field(default="", description="Basic-auth password")


class ConnectionOptions(BaseModel):
    """Fully resolved connection options for one logical target.

    Built by :func:`searchsync.config.connection.merge_options` and reused,
    unchanged, for every request sent to that target.
    """

    model_config = ConfigDict(frozen=True)

    protocol: str = Field(default="http", description="URL scheme: http or https")
    host: str = Field(default="localhost", description="Search engine host name")
    port: int | None = Field(default=9200, description="Search engine port (None to omit)")
    prefix: str = Field(default="", description="Index name prefix")
    auth: Credentials | None = Field(default=None, description="Optional basic-auth credentials")
    type: str | None = Field(default=None, description="Document type (lower-cased collection name)")
    grouper: str | None = Field(default=None, description="Field whose value keys the flattened sub-document")
    flatten: str | None = Field(default=None, description="Field holding the sub-document to flatten")

    def for_collection(self, collection: str) -> ConnectionOptions:
        """Return a copy bound to ``collection`` as the document type."""
        return self.model_copy(update={"type": collection.lower()})
