"""searchsync — mirror document-store records into a search engine and query them."""

__version__ = "0.1.0"
