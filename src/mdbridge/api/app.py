"""FastAPI application for the mdbridge local JSON API."""

import secrets
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..adapters.memory import DocumentBuffer, MemoryClipboard
from ..adapters.tree_codec import nodes_to_dicts, node_from_dict
from ..core.scanner import scan
from ..core.sniffer import looks_like_markdown


def generate_token() -> str:
    """Generate a random bearer token."""
    return secrets.token_urlsafe(32)


def _tree(data: Any) -> list[Any]:
    if not isinstance(data, list):
        raise HTTPException(status_code=422, detail="'nodes' must be a list")
    try:
        return [node_from_dict(d) for d in data]
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


def _buffer(nodes: list[Any], selection: Any) -> DocumentBuffer:
    try:
        if selection is None:
            return DocumentBuffer(nodes)
        start, end = selection
        return DocumentBuffer(nodes, int(start), int(end))
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=422, detail=f"Bad selection: {e}") from e


def create_app(runtime: Any, token: str | None = None, enable_cors: bool = False) -> Any:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime instance with converter, serializer and handlers
        token: Bearer token for authentication (None to disable auth)
        enable_cors: Enable CORS middleware

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="mdbridge API",
        description="Local JSON API for Markdown <-> document tree conversion",
        version="0.1.0",
        docs_url="/docs" if token is None else None,
        redoc_url="/redoc" if token is None else None,
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if token:
        security_scheme = HTTPBearer(auto_error=False)

        async def verify_token(
            credentials: HTTPAuthorizationCredentials | None = Security(security_scheme),  # noqa: B008
        ) -> None:
            """Verify bearer token."""
            if credentials is None or credentials.credentials != token:
                raise HTTPException(status_code=401, detail="Invalid or missing token")
    else:

        async def verify_token() -> None:
            """No-op when auth is disabled."""
            return None

    @app.get("/health")  # type: ignore[misc]
    async def health(auth: None = Depends(verify_token)) -> dict[str, Any]:
        return {"status": "ok"}

    @app.post("/convert")  # type: ignore[misc]
    async def convert(
        text: str = Body(..., embed=True),
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        """Markdown to document tree."""
        nodes = runtime.open_document(text)
        return {"nodes": nodes_to_dicts(nodes)}

    @app.post("/serialize")  # type: ignore[misc]
    async def serialize(
        nodes: Any = Body(..., embed=True),
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        """Document tree to Markdown."""
        return {"markdown": runtime.serializer.to_markdown(_tree(nodes))}

    @app.post("/html")  # type: ignore[misc]
    async def render_html(
        nodes: Any = Body(..., embed=True),
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        return {"html": runtime.html.render(_tree(nodes))}

    @app.post("/scan")  # type: ignore[misc]
    async def scan_text(
        text: str = Body(..., embed=True),
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        """Diagram blocks found in Markdown text."""
        return {
            "segments": [
                {"start": s.start, "end": s.end, "kind": s.kind.value, "content": s.content}
                for s in scan(text)
            ]
        }

    @app.post("/sniff")  # type: ignore[misc]
    async def sniff(
        text: str = Body(..., embed=True),
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        return {"markdown": looks_like_markdown(text)}

    @app.post("/paste")  # type: ignore[misc]
    async def paste(
        text: str = Body(...),
        nodes: Any = Body(None),
        selection: Any = Body(None),
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        """
        Paste text into a document at a block selection.

        `handled` is false when the host should insert the text verbatim; the
        document is then returned unchanged.
        """
        buffer = _buffer(_tree(nodes or []), selection)
        handled = runtime.paste.handle_paste(text, buffer)
        return {
            "handled": handled,
            "nodes": nodes_to_dicts(buffer.nodes),
            "selection": [buffer.start, buffer.end],
        }

    @app.post("/copy")  # type: ignore[misc]
    async def copy(
        nodes: Any = Body(...),
        selection: Any = Body(None),
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        """Clipboard payload for a block selection."""
        buffer = _buffer(_tree(nodes), selection)
        clipboard = MemoryClipboard()
        handled = runtime.copy.handle_copy(buffer, clipboard)
        return {"handled": handled, "clipboard": clipboard.data}

    return app
