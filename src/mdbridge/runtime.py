"""Runtime wiring helper for the CLI and the API."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.html_renderer import HtmlRenderer
from .adapters.markdown_it_converter import MarkdownItConverter, PerLineConverter, build_markdown_it
from .adapters.mmdc_renderer import MmdcRenderer
from .config import BridgeConfig, load_config
from .core.converter import MarkdownToTreeConverter
from .core.headings import assign_ids
from .core.model import DocumentNode
from .core.ports import DiagramRenderer
from .core.serializer import TreeToMarkdownSerializer
from .editing import CopyHandler, PasteHandler


@dataclass
class Runtime:
    """Container for all wired components."""
    converter: MarkdownToTreeConverter
    serializer: TreeToMarkdownSerializer
    html: HtmlRenderer
    paste: PasteHandler
    copy: CopyHandler
    renderer: DiagramRenderer
    config: BridgeConfig

    def open_document(self, text: str) -> list[DocumentNode]:
        """Load a whole document and give its headings unique ids."""
        return assign_ids(self.converter.load_document(text))


def build_runtime(
    config_path: Path | None = None,
    config: BridgeConfig | None = None,
) -> Runtime:
    """Build and wire all components from configuration."""
    if config is None:
        config = load_config(config_path=config_path)

    md = build_markdown_it(
        html=config.markdown.html,
        breaks=config.markdown.breaks,
        typographer=config.markdown.typographer,
        tables=config.markdown.tables,
    )
    standard = MarkdownItConverter(md)

    converter = MarkdownToTreeConverter(
        standard, view_mode=config.diagram.view_mode, theme=config.diagram.theme
    )
    paste_converter = MarkdownToTreeConverter(
        PerLineConverter(standard), view_mode=config.diagram.view_mode, theme=config.diagram.theme
    )

    serializer = TreeToMarkdownSerializer()
    html = HtmlRenderer()

    return Runtime(
        converter=converter,
        serializer=serializer,
        html=html,
        paste=PasteHandler(paste_converter),
        copy=CopyHandler(
            serializer,
            html,
            markdown_mime=config.clipboard.markdown_mime,
            html_mime=config.clipboard.html_mime,
        ),
        renderer=MmdcRenderer(command=config.diagram.renderer, timeout=config.diagram.timeout),
        config=config,
    )
