from dataclasses import dataclass
from typing import Protocol, Sequence

from .model import DiagramTheme, DocumentNode


class RenderError(Exception):
    """Raised by a DiagramRenderer when diagram source cannot be rendered."""


@dataclass(frozen=True)
class RenderResult:
    svg: str


class StandardConverter(Protocol):
    """
    Convert ordinary (non-diagram) Markdown into a forest of document nodes.
    MUST NOT be handed diagram segment content.
    """

    def convert(self, text: str) -> list[DocumentNode]:
        pass


class DiagramRenderer(Protocol):
    """
    Turn diagram source into a visual preview. Raises RenderError on failure.
    """

    def render(self, source: str, instance_id: str, theme: DiagramTheme) -> RenderResult:
        pass


class Clipboard(Protocol):
    """
    Parallel representations keyed by MIME-like type.
    """

    def set_data(self, mime: str, data: str) -> None:
        pass

    def text(self) -> str | None:
        pass


class EditorSurface(Protocol):
    """
    The rich-text editing surface that owns the document tree.
    """

    def selection_is_empty(self) -> bool:
        pass

    def selected_nodes(self) -> list[DocumentNode]:
        pass

    def replace_selection(self, nodes: Sequence[DocumentNode]) -> None:
        pass
