"""Search engine endpoint addresses derived from connection options.

Pure string composition: nothing here touches the network or validates
beyond what :func:`searchsync.config.connection.merge_options` guarantees.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any
from urllib.parse import urlencode

from searchsync.exceptions import ConfigurationError
from searchsync.models.connection import ConnectionOptions

SEARCH_PREFERENCE = "_primary_first"


def make_domain_uri(options: ConnectionOptions) -> str:
    """``protocol://host[:port]``."""
    if options.port:
        return f"{options.protocol}://{options.host}:{options.port}"
    return f"{options.protocol}://{options.host}"


def make_index_name(options: ConnectionOptions) -> str:
    """Index name for the bound type, namespaced by the prefix when set."""
    if not options.type:
        raise ConfigurationError("Connection options are not bound to a collection type.")
    return f"{options.prefix}-{options.type}" if options.prefix else options.type


def make_index_uri(options: ConnectionOptions) -> str:
    return f"{make_domain_uri(options)}/{make_index_name(options)}"


def make_type_uri(options: ConnectionOptions) -> str:
    return f"{make_index_uri(options)}/{options.type}"


def make_document_uri(options: ConnectionOptions, doc_id: Any) -> str:
    return f"{make_type_uri(options)}/{doc_id}"


def make_alias_uri(options: ConnectionOptions) -> str:
    return f"{make_domain_uri(options)}/_aliases"


def make_bulk_index_uri(index_name: str, options: ConnectionOptions) -> str:
    return f"{make_domain_uri(options)}/{index_name}/_bulk"


def _search_query(search_type: str) -> str:
    return urlencode({"search_type": search_type, "preference": SEARCH_PREFERENCE})


def make_search_uri(options: ConnectionOptions, search_type: str = "dfs_query_then_fetch") -> str:
    """Search endpoint covering every index that starts with the bound index name."""
    return f"{make_index_uri(options)}*/_search?{_search_query(search_type)}"


def make_collections_search_uri(
    options: ConnectionOptions,
    collections: Sequence[str] | None = None,
    search_type: str = "dfs_query_then_fetch",
) -> str:
    """Search endpoint spanning several collections.

    With a prefix, named collections are namespaced (``prefix-name``) and no
    collections means every prefixed index (``prefix*``).  Without a prefix,
    names are used as given and no collections means ``_all``.
    """
    if options.prefix:
        if collections:
            indices = [f"{options.prefix}-{collection}" for collection in collections]
        else:
            indices = [f"{options.prefix}*"]
    else:
        indices = list(collections) if collections else ["_all"]

    return f"{make_domain_uri(options)}/{','.join(indices)}/_search?{_search_query(search_type)}"
