"""Input validation for CLI arguments."""
import re
import sys

from azure_blob_sas.sas.domains.models import Position, Selection

SELECTION_PATTERN = re.compile(r'^(\d+):(\d+)-(\d+):(\d+)$')


def parse_selection(text: str) -> Selection:
    """
    Parse a 1-based LINE:COL-LINE:COL range into a zero-based selection.

    Args:
        text: Range such as 3:8-3:72 (end column is exclusive)

    Raises:
        SystemExit with code 2 if the range is malformed
    """
    match = SELECTION_PATTERN.match(text.strip()) if text else None

    if not match or any(int(part) < 1 for part in match.groups()):
        print(f"Error: Invalid selection '{text}'", file=sys.stderr)
        print("\nSelections must match: LINE:COL-LINE:COL (1-based, end column exclusive)", file=sys.stderr)
        print("\nExamples of valid selections:", file=sys.stderr)
        print("  ✓ 3:8-3:72", file=sys.stderr)
        print("  ✓ 10:1-11:5", file=sys.stderr)
        sys.exit(2)

    start_line, start_col, end_line, end_col = (int(part) - 1 for part in match.groups())
    return Selection(Position(start_line, start_col), Position(end_line, end_col))


def validate_urls(urls) -> None:
    """
    Validate that at least one non-blank URL was given.

    Raises:
        SystemExit with code 2 if validation fails
    """
    if not urls or not any(url.strip() for url in urls):
        print("Error: At least one URL is required", file=sys.stderr)
        print("\nExample: blobsas sign https://myaccount.blob.core.windows.net/container/file.txt", file=sys.stderr)
        sys.exit(2)
