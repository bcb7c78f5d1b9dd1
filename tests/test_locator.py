"""Tests for URI parsing into blob locators."""
import pytest

from azure_blob_sas.sas.domains.editor import TextDocument
from azure_blob_sas.sas.domains.errors import LocatorError, ParseError
from azure_blob_sas.sas.domains.locator import (
    find_blob_uris,
    parse_blob_url,
    parse_url,
)
from azure_blob_sas.sas.domains.models import BlobLocator


def locate(text):
    return parse_blob_url(parse_url(text))


class TestParseUrl:
    """Test suite for generic URL parsing."""

    def test_parses_components(self):
        url = parse_url("https://user:pw@acct.blob.core.windows.net:8443/c/b.txt?x=1#frag")

        assert url.scheme == "https"
        assert url.netloc == "user:pw@acct.blob.core.windows.net:8443"
        assert url.path == "/c/b.txt"
        assert url.query == "x=1"
        assert url.fragment == "frag"

    def test_strips_surrounding_whitespace(self):
        url = parse_url("  https://acct.blob.core.windows.net/c/b\n")
        assert url.path == "/c/b"

    @pytest.mark.parametrize("text", [
        "",
        "not a url",
        "acct.blob.core.windows.net/c/b",
        "https:///c/b",
        "https://[::1/c/b",
        "https://acct.blob.core.windows.net:notaport/c/b",
    ])
    def test_rejects_malformed_input(self, text):
        with pytest.raises(ParseError):
            parse_url(text)


class TestParseBlobUrl:
    """Test suite for account, container and blob extraction."""

    def test_extracts_nested_blob_path(self):
        locator = locate("https://account.blob.core.windows.net/container/blob/path?sv=1")
        assert locator == BlobLocator(account_name="account", container="container", blob="blob/path")

    def test_any_scheme_is_accepted(self):
        locator = locate("http://account.blob.core.windows.net/container/file.bin")
        assert locator.account_name == "account"

    def test_trailing_slash_gives_empty_blob(self):
        locator = locate("https://account.blob.core.windows.net/container/")
        assert locator.container == "container"
        assert locator.blob == ""

    def test_port_and_credentials_are_ignored_for_account_name(self):
        locator = locate("https://me@account.blob.core.windows.net:443/c/b")
        assert locator.account_name == "account"

    @pytest.mark.parametrize("service", ["file", "queue", "table"])
    def test_other_services_parse_as_blob_urls(self, service):
        locator = locate(f"https://account.{service}.core.windows.net/c/b")
        assert locator == BlobLocator("account", "c", "b")

    def test_rejects_foreign_host(self):
        with pytest.raises(LocatorError) as exc_info:
            locate("https://example.com/container/blob")

        assert "cannot find account name, container, or blob" in str(exc_info.value)

    def test_rejects_unknown_service(self):
        with pytest.raises(LocatorError):
            locate("https://account.dfs.core.windows.net/container/blob")

    @pytest.mark.parametrize("path", ["", "/", "/container"])
    def test_rejects_paths_without_blob_segment(self, path):
        url = parse_url(f"https://account.blob.core.windows.net{path}")
        with pytest.raises(LocatorError):
            parse_blob_url(url)


class TestFindBlobUris:
    """Test suite for locating storage URIs in a document."""

    def test_finds_uris_with_positions(self):
        document = TextDocument(
            "first: https://a.blob.core.windows.net/c/one.txt\n"
            "see (https://b.blob.core.windows.net/c/two.txt).\n"
            "ignore https://example.com/c/three.txt\n"
        )

        selections = find_blob_uris(document)

        assert [document.get_text(s) for s in selections] == [
            "https://a.blob.core.windows.net/c/one.txt",
            "https://b.blob.core.windows.net/c/two.txt",
        ]
        assert selections[0].start.line == 0
        assert selections[0].start.character == 7
        assert selections[1].start.line == 1

    def test_keeps_query_and_fragment(self):
        document = TextDocument('url = "https://a.blob.core.windows.net/c/x?sv=1&sig=abc#top"')

        selections = find_blob_uris(document)

        assert document.get_text(selections[0]) == "https://a.blob.core.windows.net/c/x?sv=1&sig=abc#top"

    def test_no_uris(self):
        assert find_blob_uris(TextDocument("nothing to see")) == []
