"""Document handles: the identity and lifetime unit of one identifier tree."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from pathlib import Path

from .identifiers.positions import Position

_DOCUMENT_IDS = itertools.count(1)


def read_text(path: Path) -> str:
    """Read text using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1; as a final fallback decodes
    raw bytes with UTF-8 replacement semantics.
    """
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


@dataclass(eq=False)
class DocumentHandle:
    """One open document.

    Hashes by identity so it can key per-document caches. ``doc_id`` is
    assigned from a process-wide counter and takes part in identifier ids.
    ``language`` is the grammar name outline sources dispatch on.
    """

    text: str = ""
    path: Path | None = None
    language: str | None = None
    doc_id: int = field(default_factory=lambda: next(_DOCUMENT_IDS))
    revision: int = 0

    @classmethod
    def from_path(cls, path: Path, language: str | None = None) -> DocumentHandle:
        """Load ``path`` and detect its language unless one is given."""
        from .outline.languages import detect_language

        target = Path(path)
        text = read_text(target)
        if language is None:
            language = detect_language(target, text)
        return cls(text=text, path=target, language=language)

    def first_position(self) -> Position:
        return Position(0, 0)

    def end_position(self) -> Position:
        lines = self.text.split("\n")
        return Position(len(lines) - 1, len(lines[-1]))

    def set_text(self, text: str) -> None:
        """Replace the buffer contents and bump ``revision``."""
        self.text = text
        self.revision += 1

    def set_language(self, language: str | None) -> bool:
        """Switch grammar; returns ``True`` when the language changed."""
        if language == self.language:
            return False
        self.language = language
        return True
