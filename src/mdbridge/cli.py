"""CLI for mdbridge - Markdown <-> document tree conversion."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .adapters.tree_codec import FORMATS, dump_tree, load_tree
from .core.diagrams import render_preview, template_for
from .core.model import DiagramBlock, DiagramKind
from .core.scanner import scan
from .core.sniffer import looks_like_markdown
from .runtime import build_runtime

logger = logging.getLogger("mdbridge")


def _read_input(path: str | None) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _write_output(text: str, out: str | None) -> None:
    if out:
        Path(out).write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)


def cmd_convert(args: argparse.Namespace, rt: Any) -> int:
    """Markdown file to document tree (YAML or JSON)."""
    nodes = rt.open_document(_read_input(args.file))
    _write_output(dump_tree(nodes, args.format), args.out)
    return 0


def cmd_serialize(args: argparse.Namespace, rt: Any) -> int:
    """Document tree file back to Markdown."""
    nodes = load_tree(_read_input(args.file), args.format)
    _write_output(rt.serializer.to_markdown(nodes), args.out)
    return 0


def cmd_roundtrip(args: argparse.Namespace, rt: Any) -> int:
    """Load a Markdown file into a tree and save it straight back."""
    text = _read_input(args.file)
    result = rt.serializer.to_markdown(rt.open_document(text))
    if args.check:
        before = [s.content for s in scan(text)]
        after = [s.content for s in scan(result)]
        if before != after:
            print(
                f"Diagram blocks changed: {len(before)} before, {len(after)} after",
                file=sys.stderr,
            )
            return 1
        if not args.quiet:
            print(f"OK: {len(after)} diagram block(s) preserved")
        return 0
    _write_output(result, args.out)
    return 0


def cmd_scan(args: argparse.Namespace, rt: Any) -> int:
    """List diagram blocks with their offsets and kinds."""
    segments = scan(_read_input(args.file))
    if args.format == "json":
        data = [
            {"start": s.start, "end": s.end, "kind": s.kind.value, "content": s.content}
            for s in segments
        ]
        print(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        for s in segments:
            first = s.content.split("\n", 1)[0]
            print(f"{s.start}\t{s.end}\t{s.kind.value}\t{first}")
    return 0


def cmd_sniff(args: argparse.Namespace, rt: Any) -> int:
    """Exit 0 if the input looks like Markdown, 1 otherwise."""
    found = looks_like_markdown(_read_input(args.file))
    if not args.quiet:
        print("markdown" if found else "plain")
    return 0 if found else 1


def cmd_html(args: argparse.Namespace, rt: Any) -> int:
    """Markdown file to the HTML fragment used for rich copies."""
    nodes = rt.open_document(_read_input(args.file))
    _write_output(rt.html.render(nodes) + "\n", args.out)
    return 0


def cmd_render(args: argparse.Namespace, rt: Any) -> int:
    """Render every diagram block of a Markdown file to SVG."""
    nodes = rt.open_document(_read_input(args.file))
    diagrams = [n for n in nodes if isinstance(n, DiagramBlock)]
    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)

    failed = 0
    for i, block in enumerate(diagrams, start=1):
        instance_id = f"diagram-{i}"
        preview = render_preview(block, rt.renderer, instance_id)
        if preview.ok:
            target = out_dir / f"{instance_id}.svg"
            target.write_text(preview.svg or "", encoding="utf-8")
            if not args.quiet:
                print(f"{target}\t{block.kind.value}")
        else:
            failed += 1
            print(f"{instance_id}: {preview.error}", file=sys.stderr)

    if not args.quiet:
        print(f"Rendered: {len(diagrams) - failed}/{len(diagrams)}")
    return 1 if failed else 0


def cmd_template(args: argparse.Namespace, rt: Any) -> int:
    """Print a starter diagram as a fenced block."""
    block = DiagramBlock(source=template_for(args.kind).source, kind=DiagramKind(args.kind))
    sys.stdout.write(rt.serializer.to_markdown([block]))
    return 0


def cmd_serve(args: argparse.Namespace, rt: Any) -> int:
    """Start local JSON API server."""
    try:
        import uvicorn

        from .api.app import create_app, generate_token
    except ImportError as e:
        print(
            "Error: API dependencies not installed. "
            "Install with: pip install mdbridge[api]",
            file=sys.stderr
        )
        print(f"Details: {e}", file=sys.stderr)
        return 1

    token_arg = getattr(args, 'token', 'auto')
    token = None

    if token_arg == 'auto':
        token = generate_token()
        print(f"Generated bearer token: {token}")
        print(f"Use in requests: Authorization: Bearer {token}")
    elif token_arg == 'none':
        print("Warning: Running without authentication. Only use in trusted environments.")
        token = None
    else:
        token = token_arg

    app = create_app(rt, token=token, enable_cors=args.cors)

    print(f"Starting server on http://{args.host}:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port, log_level="info")
    return 0


def _configure_logging(args: argparse.Namespace, level: str) -> None:
    if args.verbose:
        level = "DEBUG"
    elif args.quiet:
        level = "ERROR"
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdbridge",
        description="Convert Markdown with Mermaid diagrams to and from a document tree",
    )
    parser.add_argument("--config", type=Path, help="Path to mdbridge.toml")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress informational output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # convert command
    parser_convert = subparsers.add_parser("convert", help="Markdown to document tree")
    parser_convert.add_argument("file", nargs="?", help="Markdown file (default: stdin)")
    parser_convert.add_argument("--format", choices=FORMATS, default="yaml")
    parser_convert.add_argument("-o", "--out", help="Write to file instead of stdout")

    # serialize command
    parser_serialize = subparsers.add_parser("serialize", help="Document tree to Markdown")
    parser_serialize.add_argument("file", nargs="?", help="Tree file (default: stdin)")
    parser_serialize.add_argument("--format", choices=FORMATS, default="yaml")
    parser_serialize.add_argument("-o", "--out", help="Write to file instead of stdout")

    # roundtrip command
    parser_roundtrip = subparsers.add_parser("roundtrip", help="Load and save a Markdown file")
    parser_roundtrip.add_argument("file", nargs="?", help="Markdown file (default: stdin)")
    parser_roundtrip.add_argument("-o", "--out", help="Write to file instead of stdout")
    parser_roundtrip.add_argument(
        "--check", action="store_true",
        help="Only verify that diagram blocks survive the round trip",
    )

    # scan command
    parser_scan = subparsers.add_parser("scan", help="List diagram blocks")
    parser_scan.add_argument("file", nargs="?", help="Markdown file (default: stdin)")
    parser_scan.add_argument(
        "--format", choices=["json", "tsv"], default="tsv",
        help="Output format (default: tsv)"
    )

    # sniff command
    parser_sniff = subparsers.add_parser("sniff", help="Does the input contain Markdown syntax?")
    parser_sniff.add_argument("file", nargs="?", help="Text file (default: stdin)")

    # html command
    parser_html = subparsers.add_parser("html", help="Markdown to HTML fragment")
    parser_html.add_argument("file", nargs="?", help="Markdown file (default: stdin)")
    parser_html.add_argument("-o", "--out", help="Write to file instead of stdout")

    # render command
    parser_render = subparsers.add_parser("render", help="Render diagram blocks to SVG")
    parser_render.add_argument("file", nargs="?", help="Markdown file (default: stdin)")
    parser_render.add_argument("--out", required=True, help="Output directory")

    # template command
    parser_template = subparsers.add_parser("template", help="Print a starter diagram")
    parser_template.add_argument("kind", choices=[k.value for k in DiagramKind])

    # serve command
    parser_serve = subparsers.add_parser("serve", help="Start local JSON API server")
    parser_serve.add_argument(
        "--host", default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )
    parser_serve.add_argument(
        "--port", type=int, default=8765,
        help="Port to bind to (default: 8765)"
    )
    parser_serve.add_argument(
        "--token", default="auto",
        help="Bearer token (auto|<string>|none, default: auto)"
    )
    parser_serve.add_argument(
        "--cors", action="store_true",
        help="Enable CORS (default: false)"
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        rt = build_runtime(config_path=args.config)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    _configure_logging(args, rt.config.logging.level)

    handlers = {
        "convert": cmd_convert,
        "serialize": cmd_serialize,
        "roundtrip": cmd_roundtrip,
        "scan": cmd_scan,
        "sniff": cmd_sniff,
        "html": cmd_html,
        "render": cmd_render,
        "template": cmd_template,
        "serve": cmd_serve,
    }

    handler = handlers.get(args.cmd)
    if handler:
        try:
            exit_code = handler(args, rt)
            sys.exit(exit_code)
        except Exception as e:
            logger.debug("Command %s failed", args.cmd, exc_info=True)
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
