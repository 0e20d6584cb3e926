"""Paste and copy bridges between the clipboard and the editing surface."""

import logging

from .adapters.html_renderer import HtmlRenderer
from .core.converter import MarkdownToTreeConverter
from .core.ports import Clipboard, EditorSurface
from .core.serializer import TreeToMarkdownSerializer
from .core.sniffer import looks_like_markdown

logger = logging.getLogger(__name__)


class PasteHandler:
    """
    Turn pasted Markdown into document nodes.

    `handle_paste` returns False whenever the host should run its default
    plain-text paste: nothing to paste, no Markdown in it, or a failed
    conversion.
    """

    def __init__(self, converter: MarkdownToTreeConverter):
        self.converter = converter

    def handle_paste(self, text: str | None, surface: EditorSurface) -> bool:
        if not text:
            return False
        if not looks_like_markdown(text):
            return False

        try:
            nodes = self.converter.parse_slice(text)
        except Exception:
            logger.exception("Markdown paste conversion failed; falling back to plain text")
            return False

        surface.replace_selection(nodes)
        logger.debug("Pasted %d node(s)", len(nodes))
        return True


class CopyHandler:
    """Put the selection on the clipboard as both Markdown and HTML."""

    def __init__(
        self,
        serializer: TreeToMarkdownSerializer,
        html: HtmlRenderer,
        markdown_mime: str = "text/plain",
        html_mime: str = "text/html",
    ):
        self.serializer = serializer
        self.html = html
        self.markdown_mime = markdown_mime
        self.html_mime = html_mime

    def handle_copy(self, surface: EditorSurface, clipboard: Clipboard) -> bool:
        if surface.selection_is_empty():
            return False

        nodes = surface.selected_nodes()
        try:
            markdown = self.serializer.serialize(nodes).strip()
            rich = self.html.render(nodes)
        except Exception:
            logger.exception("Copy serialization failed")
            return False

        clipboard.set_data(self.markdown_mime, markdown)
        clipboard.set_data(self.html_mime, rich)
        return True
