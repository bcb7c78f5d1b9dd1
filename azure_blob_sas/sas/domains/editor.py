"""In-memory text editor model: documents, selections and edit transactions."""
import bisect
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence, TextIO, Tuple

from .models import Position, Selection

logger = logging.getLogger(__name__)


class TextDocument:
    """Text buffer addressed by zero-based line/character positions."""

    def __init__(self, text: str = ""):
        self._text = text
        self._line_starts = self._compute_line_starts(text)

    @staticmethod
    def _compute_line_starts(text: str) -> List[int]:
        starts = [0]
        for index, char in enumerate(text):
            if char == "\n":
                starts.append(index + 1)
        return starts

    @classmethod
    def from_path(cls, path) -> "TextDocument":
        """Load a document from disk, keeping line endings untouched."""
        with open(path, 'r', encoding='utf-8', newline='') as f:
            return cls(f.read())

    def save(self, path) -> None:
        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(self._text)
        logger.info(f"Saved document to {Path(path)}")

    @property
    def text(self) -> str:
        return self._text

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def offset_at(self, position: Position) -> int:
        """
        Convert a position to an absolute offset.

        Raises:
            ValueError: If the position lies outside the document
        """
        if position.line < 0 or position.line >= self.line_count:
            raise ValueError(f"Line {position.line} is outside the document")

        line_start = self._line_starts[position.line]
        if position.line + 1 < self.line_count:
            line_end = self._line_starts[position.line + 1] - 1
        else:
            line_end = len(self._text)

        if position.character < 0 or line_start + position.character > line_end:
            raise ValueError(f"Character {position.character} is outside line {position.line}")

        return line_start + position.character

    def position_at(self, offset: int) -> Position:
        if offset < 0 or offset > len(self._text):
            raise ValueError(f"Offset {offset} is outside the document")
        line = bisect.bisect_right(self._line_starts, offset) - 1
        return Position(line, offset - self._line_starts[line])

    def get_text(self, selection: Optional[Selection] = None) -> str:
        if selection is None:
            return self._text
        return self._text[self.offset_at(selection.start):self.offset_at(selection.end)]

    def _replace_all(self, text: str) -> None:
        self._text = text
        self._line_starts = self._compute_line_starts(text)


class TextEditorEdit:
    """Collects replacements during a single edit transaction."""

    def __init__(self):
        self.replacements: List[Tuple[Selection, str]] = []

    def replace(self, selection: Selection, text: str) -> None:
        self.replacements.append((selection, text))


class TextEditor:
    """A document together with the user's current selections."""

    def __init__(self, document: TextDocument, selections: Sequence[Selection] = ()):
        self.document = document
        self.selections = list(selections)

    @property
    def selection(self) -> Optional[Selection]:
        """Primary selection, or None when there is none."""
        return self.selections[0] if self.selections else None

    def edit(self, callback: Callable[[TextEditorEdit], None]) -> bool:
        """
        Apply every replacement made by callback as one transaction.

        Ranges refer to the document before the edit. Replacements are applied
        from the end of the document backwards, so earlier ranges never drift.

        Returns:
            True when the document was changed

        Raises:
            ValueError: If a range is invalid or two ranges overlap; nothing is applied
        """
        builder = TextEditorEdit()
        callback(builder)

        if not builder.replacements:
            return False

        resolved = sorted(
            (
                (self.document.offset_at(selection.start), self.document.offset_at(selection.end), text)
                for selection, text in builder.replacements
            ),
            key=lambda item: (item[0], item[1]),
        )

        for (_, prev_end, _), (start, _, _) in zip(resolved, resolved[1:]):
            if start < prev_end:
                raise ValueError("Overlapping ranges are not allowed in a single edit")

        text = self.document.text
        for start, end, replacement in reversed(resolved):
            text = text[:start] + replacement + text[end:]

        self.document._replace_all(text)
        logger.debug(f"Applied {len(resolved)} replacement(s)")
        return True


class OutputChannel:
    """Append-only text surface for detailed diagnostics."""

    def __init__(self, name: str, stream: Optional[TextIO] = None):
        self.name = name
        self.stream = stream
        self._lines: List[str] = []

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    def append_line(self, value: str) -> None:
        self._lines.extend(value.splitlines() or [""])

    def show(self) -> None:
        stream = self.stream or sys.stderr
        print(f"=== {self.name} ===", file=stream)
        for line in self._lines:
            print(line, file=stream)
