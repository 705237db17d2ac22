"""
Inheritance sources for decisions files.

A source spec is either a bare string (local path, or a URL when it
starts with http:// or https://) or a mapping with one of:

    {'url': ..., 'authorization': ...}
    {'package': ..., 'path': ...}   ('gem' is accepted in place of 'package')
    {'path': ...}

Each source knows how to read its raw text. Parsing and replay happen
elsewhere.
"""
import logging
import os
import re
from abc import ABC, abstractmethod
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import requests

from decisioning.errors import FetchError, MalformedDecisionsError, UnresolvedSecretError
from .http_client import HttpClient

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(r'^https?://', re.IGNORECASE)
SECRET_REFERENCE = re.compile(r'\$(\w+)')


class InheritanceSource(ABC):
    """
    Abstract base class for inherited decision sources.

    Subclasses implement read(). `spec` keeps the original, unexpanded
    value so it can be written back to the operation log verbatim.
    """

    def __init__(self, spec: Any):
        self.spec = spec

    @property
    @abstractmethod
    def key(self) -> Tuple[str, ...]:
        """Identity used to detect inheritance cycles."""
        pass

    @abstractmethod
    def read(self) -> str:
        """
        Load the raw decisions text.

        Raises:
            FetchError: If the source cannot be read
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.spec!r})"

    def __str__(self) -> str:
        return ':'.join(self.key)


class LocalFileSource(InheritanceSource):
    """Decisions file on the local filesystem."""

    def __init__(self, spec: Any, path: str):
        super().__init__(spec)
        self.path = Path(path)

    @property
    def key(self) -> Tuple[str, ...]:
        return ('path', str(self.path.expanduser().resolve()))

    def read(self) -> str:
        logger.debug(f"Reading decisions from {self.path}")
        try:
            return self.path.expanduser().read_text(encoding='utf-8')
        except OSError as e:
            raise FetchError(str(self.path), f"{type(e).__name__}: {e}") from e


class RemoteUrlSource(InheritanceSource):
    """Decisions file served over HTTP(S), optionally behind a bearer token."""

    def __init__(self, spec: Any, url: str, authorization: Optional[str], client: HttpClient):
        super().__init__(spec)
        self.url = url
        self.authorization = authorization
        self.client = client

    @property
    def key(self) -> Tuple[str, ...]:
        return ('url', self.url)

    def read(self) -> str:
        headers = {}
        if self.authorization:
            headers['Authorization'] = resolve_authorization(self.authorization)

        try:
            return self.client.get_text(self.url, headers=headers)
        except requests.RequestException as e:
            raise FetchError(self.url, f"{type(e).__name__}: {e}") from e


class PackageFileSource(InheritanceSource):
    """Decisions file shipped inside an installed Python package."""

    def __init__(self, spec: Any, package: str, path: str):
        super().__init__(spec)
        self.package = package
        self.path = path

    @property
    def key(self) -> Tuple[str, ...]:
        return ('package', self.package, self.path)

    def read(self) -> str:
        location = f"{self.package}:{self.path}"
        logger.debug(f"Reading decisions from package resource {location}")
        try:
            return resources.files(self.package).joinpath(self.path).read_text(encoding='utf-8')
        except ModuleNotFoundError as e:
            raise FetchError(location, f"package {self.package} is not installed") from e
        except (OSError, TypeError) as e:
            raise FetchError(location, f"{type(e).__name__}: {e}") from e


def resolve_authorization(value: str) -> str:
    """
    Expand $NAME references from the environment into an Authorization header value.

    'Bearer $TOKEN' becomes 'Bearer <value of TOKEN>'. A bare token with no
    scheme is sent as a bearer token.

    Raises:
        UnresolvedSecretError: If a referenced variable is not set
    """
    def substitute(match: re.Match) -> str:
        variable = match.group(1)
        secret = os.environ.get(variable)
        if secret is None:
            raise UnresolvedSecretError(variable)
        return secret

    header = SECRET_REFERENCE.sub(substitute, str(value)).strip()
    if ' ' not in header:
        header = f"Bearer {header}"
    return header


def source_from_spec(spec: Any, client: HttpClient) -> InheritanceSource:
    """
    Normalize a source spec into an InheritanceSource.

    Raises:
        MalformedDecisionsError: If the spec names no usable location
    """
    if isinstance(spec, str):
        if URL_PATTERN.match(spec):
            return RemoteUrlSource(spec, spec, None, client)
        return LocalFileSource(spec, spec)

    if isinstance(spec, dict):
        config: Dict[str, Any] = {str(k).lstrip(':'): v for k, v in spec.items()}
        if config.get('url'):
            return RemoteUrlSource(spec, config['url'], config.get('authorization'), client)

        package = config.get('package') or config.get('gem')
        if package:
            if not config.get('path'):
                raise MalformedDecisionsError(f"Package inheritance source needs a path: {spec!r}")
            return PackageFileSource(spec, package, config['path'])

        if config.get('path'):
            return LocalFileSource(spec, config['path'])

    raise MalformedDecisionsError(f"Unrecognized inheritance source: {spec!r}")
