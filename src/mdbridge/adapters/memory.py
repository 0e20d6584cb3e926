from typing import Any, Sequence

from ..core.ports import Clipboard, EditorSurface


class MemoryClipboard(Clipboard):
    """Process-local clipboard holding one string per MIME type."""

    def __init__(self, data: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(data or {})

    def set_data(self, mime: str, data: str) -> None:
        self.data[mime] = data

    def text(self) -> str | None:
        return self.data.get("text/plain")


class DocumentBuffer(EditorSurface):
    """
    Editing surface over a list of top-level blocks.

    The selection is the half-open block range [start, end); start == end is a
    caret between blocks.
    """

    def __init__(self, nodes: Sequence[Any] = (), start: int = 0, end: int | None = None):
        self.nodes: list[Any] = list(nodes)
        self.select(start, len(self.nodes) if end is None else end)

    def select(self, start: int, end: int) -> None:
        if not 0 <= start <= end <= len(self.nodes):
            raise ValueError(f"Selection [{start}, {end}) outside document of {len(self.nodes)} blocks")
        self.start, self.end = start, end

    def selection_is_empty(self) -> bool:
        return self.start == self.end

    def selected_nodes(self) -> list[Any]:
        return self.nodes[self.start:self.end]

    def replace_selection(self, nodes: Sequence[Any]) -> None:
        inserted = list(nodes)
        self.nodes[self.start:self.end] = inserted
        # Caret lands after the inserted content.
        self.start = self.end = self.start + len(inserted)
