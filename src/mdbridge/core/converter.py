"""Markdown text to document-tree conversion with diagram splicing."""

import logging

from .model import DiagramBlock, DiagramSegment, DiagramTheme, DocumentNode, Paragraph, ViewMode
from .ports import StandardConverter
from .scanner import scan

logger = logging.getLogger(__name__)


class MarkdownToTreeConverter:
    """
    Split text at diagram fences, hand the prose between them to a standard
    converter and build one opaque DiagramBlock per fence.

    `parse_slice` produces a forest for splicing at a selection; `load_document`
    produces the top-level blocks of a freshly opened document. Both run the
    same segmentation and return the same nodes; heading ids are left as found
    for the host to assign.
    """

    def __init__(
        self,
        standard: StandardConverter,
        view_mode: ViewMode = ViewMode.PREVIEW,
        theme: DiagramTheme = DiagramTheme.DEFAULT,
    ):
        self.standard = standard
        self.view_mode = view_mode
        self.theme = theme

    def parse_slice(self, text: str) -> list[DocumentNode]:
        return self._convert(text)

    def load_document(self, text: str) -> list[DocumentNode]:
        return self._convert(text)

    def _convert(self, text: str) -> list[DocumentNode]:
        segments = scan(text)
        if not segments:
            return list(self.standard.convert(text))

        logger.debug("Splicing %d diagram block(s)", len(segments))
        nodes: list[DocumentNode] = []
        cursor = 0
        for i, segment in enumerate(segments):
            if segment.start > cursor:
                nodes.extend(self._prose(text[cursor:segment.start]))

            nodes.append(self._diagram(segment))

            # Keep the diagram from visually merging with whatever follows it.
            if i < len(segments) - 1 or segment.end < len(text):
                nodes.append(Paragraph())

            cursor = segment.end

        if cursor < len(text):
            nodes.extend(self._prose(text[cursor:]))

        return nodes

    def _prose(self, chunk: str) -> list[DocumentNode]:
        if not chunk.strip():
            return []
        return list(self.standard.convert(chunk))

    def _diagram(self, segment: DiagramSegment) -> DiagramBlock:
        return DiagramBlock(
            source=segment.content,
            kind=segment.kind,
            view_mode=self.view_mode,
            theme=self.theme,
        )
