"""
Tests for inheritance source specs and the HTTP client.
"""
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
import requests
from decisioning import FetchError, MalformedDecisionsError, UnresolvedSecretError
from ingestion import (
    HttpClient,
    LocalFileSource,
    PackageFileSource,
    RemoteUrlSource,
    resolve_authorization,
    source_from_spec,
)


class TestSourceFromSpec:
    """Test normalization of source specs."""

    def test_bare_path_is_local(self, http_client):
        """Bare path should become a local file source."""
        source = source_from_spec('./config/inherit.yml', http_client)

        assert isinstance(source, LocalFileSource)
        assert source.spec == './config/inherit.yml'

    @pytest.mark.parametrize('url', ['https://example.com/d.yml', 'http://example.com/d.yml'])
    def test_bare_url_is_remote(self, http_client, url):
        """Bare http(s) URL should become a remote source without authorization."""
        source = source_from_spec(url, http_client)

        assert isinstance(source, RemoteUrlSource)
        assert source.url == url
        assert source.authorization is None

    def test_url_mapping_keeps_authorization(self, http_client):
        """URL mapping should keep its authorization unexpanded and its original spec."""
        spec = {'url': 'https://example.com/d.yml', 'authorization': 'Bearer $TOKEN'}

        source = source_from_spec(spec, http_client)

        assert isinstance(source, RemoteUrlSource)
        assert source.authorization == 'Bearer $TOKEN'
        assert source.spec is spec

    def test_package_mapping(self, http_client):
        """Package mapping should become a package file source."""
        source = source_from_spec({'package': 'policy', 'path': 'doc/decisions.yml'}, http_client)

        assert isinstance(source, PackageFileSource)
        assert source.key == ('package', 'policy', 'doc/decisions.yml')

    def test_gem_mapping_is_a_package_source(self, http_client):
        """Legacy gem key should be read as package."""
        source = source_from_spec({'gem': 'policy', 'path': 'doc/decisions.yml'}, http_client)
        assert isinstance(source, PackageFileSource)

    def test_path_mapping_is_local(self, http_client):
        """Path mapping should become a local file source."""
        assert isinstance(source_from_spec({'path': 'a.yml'}, http_client), LocalFileSource)

    def test_package_without_path_is_rejected(self, http_client):
        """Package source without a path should be rejected."""
        with pytest.raises(MalformedDecisionsError):
            source_from_spec({'package': 'policy'}, http_client)

    @pytest.mark.parametrize('spec', [{}, {'authorization': 'x'}, 42, None])
    def test_unusable_specs_are_rejected(self, http_client, spec):
        """Spec naming no location should raise MalformedDecisionsError."""
        with pytest.raises(MalformedDecisionsError):
            source_from_spec(spec, http_client)

    def test_local_sources_with_same_file_share_a_key(self, http_client, tmp_path):
        """Bare and mapped specs for one file should share a cycle key."""
        absolute = source_from_spec(str(tmp_path / 'a.yml'), http_client)
        mapped = source_from_spec({'path': str(tmp_path / 'a.yml')}, http_client)

        assert absolute.key == mapped.key


class TestResolveAuthorization:
    """Test bearer token and secret expansion."""

    def test_full_header_value_is_kept(self):
        """Header value with a scheme should be sent as written."""
        assert resolve_authorization('Bearer Token') == 'Bearer Token'

    def test_bare_token_gets_bearer_scheme(self):
        """Bare token should be sent as a bearer token."""
        assert resolve_authorization('Token') == 'Bearer Token'

    def test_expands_environment_reference(self):
        """Environment reference should be replaced by its value."""
        with patch.dict('os.environ', {'TOKEN_ENV': 'secret'}):
            assert resolve_authorization('Bearer $TOKEN_ENV') == 'Bearer secret'

    def test_expands_bare_environment_reference(self):
        """Bare environment reference should expand and get the bearer scheme."""
        with patch.dict('os.environ', {'TOKEN_ENV': 'secret'}):
            assert resolve_authorization('$TOKEN_ENV') == 'Bearer secret'

    def test_unset_reference_raises(self):
        """Unset environment variable should raise UnresolvedSecretError."""
        with patch.dict('os.environ', {}, clear=True):
            with pytest.raises(UnresolvedSecretError, match='TOKEN_ENV'):
                resolve_authorization('Bearer $TOKEN_ENV')


class TestLocalFileSource:
    """Test reading local decisions files."""

    def test_reads_file(self, tmp_path):
        """Local source should return the file text."""
        path = tmp_path / 'd.yml'
        path.write_text('- - permit\n  - MIT\n')

        assert LocalFileSource(str(path), str(path)).read() == '- - permit\n  - MIT\n'

    def test_missing_file(self, tmp_path):
        """Missing local file should raise FetchError naming the path."""
        path = str(tmp_path / 'missing.yml')

        with pytest.raises(FetchError) as exc_info:
            LocalFileSource(path, path).read()

        assert exc_info.value.source == path


class TestHttpClient:
    """Test single-shot GET behaviour."""

    def test_returns_body_text(self):
        """Client should GET once with headers and timeout and return the body."""
        session = MagicMock()
        session.get.return_value.text = 'body'

        client = HttpClient(timeout_seconds=7, session=session)

        assert client.get_text('https://example.com/d.yml', headers={'Authorization': 'Bearer t'}) == 'body'
        session.get.assert_called_once_with(
            'https://example.com/d.yml', headers={'Authorization': 'Bearer t'}, timeout=7
        )

    def test_http_error_propagates_without_retry(self):
        """HTTP error should propagate after a single attempt."""
        session = MagicMock()
        session.get.return_value.raise_for_status.side_effect = requests.HTTPError('500 Server Error')

        with pytest.raises(requests.HTTPError):
            HttpClient(session=session).get_text('https://example.com/d.yml')

        assert session.get.call_count == 1

    def test_timeout_becomes_fetch_error(self):
        """Request timeout should surface as FetchError."""
        session = MagicMock()
        session.get.side_effect = requests.Timeout('timed out')
        source = RemoteUrlSource('https://example.com/d.yml', 'https://example.com/d.yml', None,
                                 HttpClient(session=session))

        with pytest.raises(FetchError) as exc_info:
            source.read()

        assert isinstance(exc_info.value.__cause__, requests.Timeout)
