"""
Ingestion layer for inherited decisions.

Provides sources for loading decisions files from:
- the local filesystem
- HTTP(S) URLs, optionally with a bearer token
- files shipped inside installed Python packages
"""
from .http_client import HttpClient
from .sources import (
    InheritanceSource,
    LocalFileSource,
    PackageFileSource,
    RemoteUrlSource,
    resolve_authorization,
    source_from_spec,
)

__all__ = [
    "HttpClient",
    "InheritanceSource",
    "LocalFileSource",
    "PackageFileSource",
    "RemoteUrlSource",
    "resolve_authorization",
    "source_from_spec",
]
