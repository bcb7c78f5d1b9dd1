"""Parse Azure Storage URIs into blob locators."""
import logging
import re
from typing import List
from urllib.parse import SplitResult, urlsplit

from .editor import TextDocument
from .errors import LocatorError, ParseError
from .models import BlobLocator, Selection

logger = logging.getLogger(__name__)

# Service token is captured but not checked: file/queue/table hosts are signed as blobs
ACCOUNT_NAME_PATTERN = re.compile(r'^(.*?)\.(blob|file|queue|table)\.core\.windows\.net$')
CONTAINER_AND_BLOB_PATTERN = re.compile(r'^/([^/]+)/(.*)$')

# Candidate URIs inside free text, trailing punctuation excluded
BLOB_URI_PATTERN = re.compile(
    r'https?://[^\s/?#\'"<>]+\.(?:blob|file|queue|table)\.core\.windows\.net'
    r'(?:[/?#][^\s\'"<>]*[^\s\'"<>.,;:)\]}])?',
    re.IGNORECASE,
)

LOCATOR_ERROR_MESSAGE = "cannot find account name, container, or blob"


def parse_url(text: str) -> SplitResult:
    """
    Parse text as a generic URL.

    Args:
        text: Raw highlighted text

    Returns:
        URL components (scheme, netloc, path, query, fragment)

    Raises:
        ParseError: If the text is not a URL with a host
    """
    candidate = text.strip()
    try:
        url = urlsplit(candidate)
        hostname = url.hostname
        # Accessing port validates it
        url.port
    except ValueError as e:
        raise ParseError(f"Invalid URL {candidate!r}: {e}") from e

    if not url.scheme or not hostname:
        raise ParseError(f"Invalid URL {candidate!r}: no host")

    return url


def parse_blob_url(url: SplitResult) -> BlobLocator:
    """
    Extract account name, container and blob from a parsed URL.

    The host must look like <account>.<service>.core.windows.net and the
    path like /<container>/<blob>; the blob may be empty or contain slashes.

    Raises:
        LocatorError: If either part cannot be found
    """
    account_match = ACCOUNT_NAME_PATTERN.match(url.hostname or "")
    container_and_blob = CONTAINER_AND_BLOB_PATTERN.match(url.path)

    if not account_match or not container_and_blob:
        raise LocatorError(LOCATOR_ERROR_MESSAGE)

    if account_match.group(2) != "blob":
        logger.debug(f"Treating {account_match.group(2)} service URL as a blob URL")

    return BlobLocator(
        account_name=account_match.group(1),
        container=container_and_blob.group(1),
        blob=container_and_blob.group(2),
    )


def find_blob_uris(document: TextDocument) -> List[Selection]:
    """Return the ranges of every Azure Storage URI found in a document."""
    selections = []
    for match in BLOB_URI_PATTERN.finditer(document.text):
        selections.append(Selection(
            document.position_at(match.start()),
            document.position_at(match.end()),
        ))
    logger.debug(f"Found {len(selections)} storage URI(s) in document")
    return selections
