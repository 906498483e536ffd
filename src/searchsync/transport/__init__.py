"""Transport — retrying HTTP execution against the search engine."""

from searchsync.transport.http import EngineReply, RequestSpec, execute

__all__ = ["EngineReply", "RequestSpec", "execute"]
