"""Diagram renderer backed by the Mermaid CLI (`mmdc`)."""

import logging
import shutil
import subprocess
import tempfile
from pathlib import Path

from ..core.model import DiagramTheme
from ..core.ports import DiagramRenderer, RenderError, RenderResult

logger = logging.getLogger(__name__)

# Themes mmdc understands; others render with mermaid's default.
MMDC_THEMES = {"default", "dark", "forest", "neutral"}


def _error_details(stderr_text: str) -> str:
    lines = [line.strip() for line in (stderr_text or "").splitlines() if line.strip()]
    if not lines:
        return "unknown error"
    return "\n".join(lines[:8])


class MmdcRenderer(DiagramRenderer):
    def __init__(self, command: str = "mmdc", timeout: float = 30):
        self.command = command
        self.timeout = timeout

    def render(self, source: str, instance_id: str, theme: DiagramTheme) -> RenderResult:
        if not source.strip():
            raise RenderError("Empty diagram source")
        exe = shutil.which(self.command)
        if exe is None:
            raise RenderError(f"Mermaid CLI not found: {self.command}")

        with tempfile.TemporaryDirectory(prefix="mdbridge-") as tmp:
            src = Path(tmp) / f"{instance_id}.mmd"
            out = Path(tmp) / f"{instance_id}.svg"
            src.write_text(source, encoding="utf-8")

            cmd = [exe, "-i", str(src), "-o", str(out)]
            theme_value = DiagramTheme(theme).value
            if theme_value in MMDC_THEMES:
                cmd += ["-t", theme_value]

            logger.debug("Running %s", " ".join(cmd))
            try:
                proc = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout)
            except subprocess.TimeoutExpired as e:
                raise RenderError(f"Mermaid CLI timed out after {self.timeout}s") from e

            if proc.returncode != 0 or not out.exists():
                raise RenderError(f"Mermaid CLI failed: {_error_details(proc.stderr)}")

            return RenderResult(svg=out.read_text(encoding="utf-8"))
