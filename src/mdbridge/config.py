"""Configuration loader for mdbridge.toml."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .core.model import DiagramTheme, ViewMode

CONFIG_FILE_NAME = "mdbridge.toml"


@dataclass
class MarkdownConfig:
    """Options for the standard Markdown converter."""
    html: bool = False
    breaks: bool = False
    typographer: bool = False
    tables: bool = True


@dataclass
class DiagramConfig:
    """Attributes given to converted diagram blocks, plus the renderer command."""
    view_mode: ViewMode = ViewMode.PREVIEW
    theme: DiagramTheme = DiagramTheme.DEFAULT
    renderer: str = "mmdc"
    timeout: float = 30


@dataclass
class ClipboardConfig:
    """MIME keys used when copying."""
    markdown_mime: str = "text/plain"
    html_mime: str = "text/html"


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class BridgeConfig:
    """Complete mdbridge configuration."""
    markdown: MarkdownConfig = field(default_factory=MarkdownConfig)
    diagram: DiagramConfig = field(default_factory=DiagramConfig)
    clipboard: ClipboardConfig = field(default_factory=ClipboardConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _enum(enum_type: Any, value: Any, key: str) -> Any:
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_type)
        raise ValueError(f"Invalid {key} {value!r} (expected one of: {allowed})") from None


def load_config(config_path: Path | None = None) -> BridgeConfig:
    """
    Load configuration from mdbridge.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/mdbridge.toml
    3. ~/mdbridge.toml

    Args:
        config_path: Explicit path to config file

    Returns:
        BridgeConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_FILE_NAME)
    search_paths.append(Path.home() / CONFIG_FILE_NAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    md_data = toml_data.get("markdown", {})
    markdown_config = MarkdownConfig(
        html=bool(md_data.get("html", False)),
        breaks=bool(md_data.get("breaks", False)),
        typographer=bool(md_data.get("typographer", False)),
        tables=bool(md_data.get("tables", True)),
    )

    diagram_data = toml_data.get("diagram", {})
    diagram_config = DiagramConfig(
        view_mode=_enum(ViewMode, diagram_data.get("view_mode", "preview"), "diagram.view_mode"),
        theme=_enum(DiagramTheme, diagram_data.get("theme", "default"), "diagram.theme"),
        renderer=str(diagram_data.get("renderer", "mmdc")),
        timeout=float(diagram_data.get("timeout", 30)),
    )

    clip_data = toml_data.get("clipboard", {})
    clipboard_config = ClipboardConfig(
        markdown_mime=clip_data.get("markdown_mime", "text/plain"),
        html_mime=clip_data.get("html_mime", "text/html"),
    )

    log_data = toml_data.get("logging", {})
    level = str(log_data.get("level", "WARNING")).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Invalid logging.level {level!r}")

    return BridgeConfig(
        markdown=markdown_config,
        diagram=diagram_config,
        clipboard=clipboard_config,
        logging=LoggingConfig(level=level),
    )
