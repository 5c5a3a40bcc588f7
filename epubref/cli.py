"""
Epubref CLI.

Commands:
    info    Show version, content counts, navigation document and cover
    ls      List manifest items with their content type and category
    cat     Write the content of one item to stdout or a file

Examples:
    epubref info book.epub
    epubref ls book.epub --category images
    epubref cat book.epub chapter1.xhtml
    epubref --encoding latin-1 cat book.epub notes.xml --text
    epubref --ignore-missing cat book.epub missing.css -o out.css
"""

from __future__ import annotations

import argparse
import logging
import sys
import zipfile

from epubref.errors import EpubError

CATEGORIES = ("all", "html", "css", "images", "fonts")


def _config_from_args(args: argparse.Namespace):  # noqa: ANN202
    from epubref.runtime import get_reader_config

    return get_reader_config(
        text_encoding=args.encoding,
        ignore_missing=args.ignore_missing,
    )


def cmd_info(args: argparse.Namespace) -> int:
    """Handle info command."""
    from epubref.book import open_book
    from epubref.extract import describe_image

    with open_book(args.book, config=_config_from_args(args)) as book:
        content = book.content

        print(f"Book: {args.book}")
        if book.title:
            print(f"Title: {book.title}")
        print(f"EPUB version: {book.version.value}")
        print(f"Package: {book.package.path}")

        print()
        print("Content:")
        print(f"  HTML: {len(content.html)}")
        print(f"  CSS: {len(content.css)}")
        print(f"  Images: {len(content.images)}")
        print(f"  Fonts: {len(content.fonts)}")
        print(f"  All files: {len(content.all_files)}")

        print()
        if content.navigation_html_file is not None:
            print(f"Navigation: {content.navigation_html_file.file_name}")
        else:
            print("Navigation: none")

        if content.cover is not None:
            info = describe_image(content.cover.read_bytes())
            print(f"Cover: {content.cover.file_name} ({info.format}, {info.dimensions})")
        else:
            print("Cover: none")

    return 0


def cmd_ls(args: argparse.Namespace) -> int:
    """Handle ls command."""
    from epubref.book import open_book

    with open_book(args.book, config=_config_from_args(args)) as book:
        content = book.content
        collection = content.all_files if args.category == "all" else getattr(content, args.category)
        for href, ref in collection.items():
            print(f"{href}\t{ref.content_type.name}\t{ref.category.value}\t{ref.content_mime_type}")
    return 0


def cmd_cat(args: argparse.Namespace) -> int:
    """Handle cat command."""
    from pathlib import Path

    from epubref.book import open_book
    from epubref.content import TextContentFileRef

    with open_book(args.book, config=_config_from_args(args)) as book:
        ref = book.content.get(args.href)
        if ref is None:
            print(f"Error: No manifest item with href: {args.href}", file=sys.stderr)
            return 1
        if args.text:
            if not isinstance(ref, TextContentFileRef):
                print(f"Error: Not a text file: {args.href}", file=sys.stderr)
                return 1
            data = ref.read_text().encode("utf-8")
        else:
            data = ref.read_bytes()

    if args.output:
        Path(args.output).write_bytes(data)
        print(f"Wrote {len(data):,} bytes to {args.output}")
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="epubref",
        description="Index and read the content files of EPUB books",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print debug logging",
    )
    parser.add_argument(
        "--ignore-missing",
        action="store_true",
        help="Read files listed in the manifest but absent from the archive as empty",
    )
    parser.add_argument(
        "--encoding",
        default=None,
        help="Fallback text encoding for cat --text when no byte-order mark is present (default: utf-8)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # info
    info_parser = subparsers.add_parser(
        "info",
        help="Show version, content counts, navigation document and cover",
    )
    info_parser.add_argument(
        "book",
        help="Path to .epub file or unpacked book directory",
    )

    # ls
    ls_parser = subparsers.add_parser(
        "ls",
        help="List manifest items",
    )
    ls_parser.add_argument(
        "book",
        help="Path to .epub file or unpacked book directory",
    )
    ls_parser.add_argument(
        "-c",
        "--category",
        choices=CATEGORIES,
        default="all",
        help="Collection to list (default: all)",
    )

    # cat
    cat_parser = subparsers.add_parser(
        "cat",
        help="Write the content of one item",
    )
    cat_parser.add_argument(
        "book",
        help="Path to .epub file or unpacked book directory",
    )
    cat_parser.add_argument(
        "href",
        help="Manifest href of the item",
    )
    cat_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write to this file instead of stdout",
    )
    cat_parser.add_argument(
        "--text",
        action="store_true",
        help="Decode a text item (BOM or --encoding) and write it as UTF-8",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": cmd_info,
        "ls": cmd_ls,
        "cat": cmd_cat,
    }

    try:
        return commands[args.command](args)
    except (EpubError, FileNotFoundError, NotADirectoryError, ValueError, zipfile.BadZipFile) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
