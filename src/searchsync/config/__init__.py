"""Configuration — settings loading and connection option resolution."""

from searchsync.config.connection import merge_options
from searchsync.config.settings import RetryPolicy, Settings

__all__ = ["RetryPolicy", "Settings", "merge_options"]
