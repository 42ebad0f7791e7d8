"""
Command-line interface for ThesisQuill.

Usage:
    thesisquill export thesis.json --output thesis.docx
    thesisquill preview thesis.json --output preview.html
    thesisquill cite thesis.json --style apa
    thesisquill info thesis.json
    thesisquill version
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .exceptions import SnapshotError, ThesisQuillError

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="thesisquill",
        description="ThesisQuill - export structured theses to DOCX",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  thesisquill export thesis.json --output thesis.docx
  thesisquill export thesis.json --page-size a4 --font "Garamond"
  thesisquill preview thesis.json --output preview.html
  thesisquill cite thesis.json --style mla
  thesisquill info thesis.json --json
  thesisquill version
        """,
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Export command
    export_parser = subparsers.add_parser("export", help="Export a thesis snapshot to DOCX")
    export_parser.add_argument("input", help="Thesis snapshot JSON file")
    export_parser.add_argument(
        "-o", "--output",
        help="Output DOCX path (default: file named after the thesis title)"
    )
    export_parser.add_argument(
        "--options",
        help="JSON file with export options"
    )
    export_parser.add_argument("--font", help="Body font name")
    export_parser.add_argument(
        "--page-size",
        choices=["letter", "a4"],
        help="Page size (default: letter)"
    )

    # Preview command
    preview_parser = subparsers.add_parser("preview", help="Render the preview variant as HTML")
    preview_parser.add_argument("input", help="Thesis snapshot JSON file")
    preview_parser.add_argument(
        "-o", "--output",
        help="Output HTML path (default: input name with .html)"
    )

    # Cite command
    cite_parser = subparsers.add_parser("cite", help="Print citations and references in a preview style")
    cite_parser.add_argument("input", help="Thesis snapshot JSON file")
    cite_parser.add_argument(
        "--style",
        choices=["apa", "mla", "chicago"],
        default="apa",
        help="Citation style (default: apa)"
    )

    # Info command
    info_parser = subparsers.add_parser("info", help="Show thesis statistics")
    info_parser.add_argument("input", help="Thesis snapshot JSON file")
    info_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON"
    )

    # Version command
    subparsers.add_parser("version", help="Show version information")

    return parser


def _load(path: str):
    from .models.loader import load_thesis_file

    input_path = Path(path)
    if not input_path.exists():
        raise SnapshotError("File not found", str(input_path))
    return input_path, load_thesis_file(input_path)


def _load_options(args):
    from .config import ExportOptions

    options = ExportOptions()
    if getattr(args, "options", None):
        options_path = Path(args.options)
        try:
            data = json.loads(options_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise SnapshotError(f"Cannot read export options from {options_path}", str(e)) from e
        options = ExportOptions.from_dict(data)
    return options.with_overrides(
        font_name=getattr(args, "font", None),
        page_size=getattr(args, "page_size", None),
    )


def cmd_export(args) -> int:
    """Handle export command."""
    from .api import export_full

    input_path, thesis = _load(args.input)
    options = _load_options(args)

    print(f"📄 Exporting: {input_path}")
    artifact = export_full(thesis, options)
    output_path = Path(args.output) if args.output else input_path.parent / artifact.filename
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(artifact.content)
    except OSError as e:
        raise ThesisQuillError(f"Failed to write {output_path}", str(e)) from e

    print(f"✅ Saved: {output_path}")
    print(f"   Blocks: {len(artifact.blocks)}")
    return 0


def cmd_preview(args) -> int:
    """Handle preview command."""
    from .api import export_preview

    input_path, thesis = _load(args.input)
    preview = export_preview(thesis)
    output_path = Path(args.output) if args.output else input_path.with_suffix(".html")
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(preview.html, encoding="utf-8")
    except OSError as e:
        raise ThesisQuillError(f"Failed to write {output_path}", str(e)) from e

    print(f"✅ Saved preview: {output_path}")
    return 0


def cmd_cite(args) -> int:
    """Handle cite command."""
    from .converters.citations import format_preview

    _, thesis = _load(args.input)
    for section in thesis.iter_sections():
        records = list(section.citations) + list(section.references)
        if not records:
            continue
        print(f"# {section.title or section.id}")
        for record in records:
            print(format_preview(record, args.style))
        print()
    return 0


def collect_info(thesis) -> dict:
    """Counts reported by the info command."""
    from .models.thesis import SectionType

    sections = list(thesis.iter_sections())
    return {
        "title": next((s.title for s in thesis.front_matter_of_type(SectionType.TITLE)), None),
        "author": thesis.metadata.author_name,
        "front_matter": len(thesis.front_matter),
        "chapters": len(thesis.chapters),
        "back_matter": len(thesis.back_matter),
        "sections": len(sections),
        "figures": sum(len(s.figures) for s in sections),
        "tables": sum(len(s.tables) for s in sections),
        "citations": sum(len(s.citations) for s in sections),
        "references": sum(len(s.references) for s in sections),
    }


def cmd_info(args) -> int:
    """Handle info command."""
    input_path, thesis = _load(args.input)
    info = collect_info(thesis)

    if args.json:
        print(json.dumps(info, indent=2, ensure_ascii=False))
    else:
        print(f"📄 File: {input_path}")
        print()
        print("📊 Statistics:")
        for key, value in info.items():
            if value is not None:
                print(f"   {key}: {value}")
    return 0


def cmd_version(args=None) -> int:
    """Handle version command."""
    from .version import __version__
    print(f"ThesisQuill v{__version__}")
    print("Structured thesis export to DOCX")
    return 0


COMMANDS = {
    "export": cmd_export,
    "preview": cmd_preview,
    "cite": cmd_cite,
    "info": cmd_info,
    "version": cmd_version,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    from .utils.logger import setup_logging

    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 0

    try:
        return handler(args)
    except ThesisQuillError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
