"""Tests for the epubref command line."""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import BOOK_CSS, book_files, build_zip
from epubref.cli import main


@pytest.fixture(autouse=True)
def _quiet_logging(isolate_logging):
    yield


def test_no_command_prints_help(capsys) -> None:
    assert main([]) == 0
    assert "usage: epubref" in capsys.readouterr().out


def test_info(epub_path: Path, capsys) -> None:
    assert main(["info", str(epub_path)]) == 0
    out = capsys.readouterr().out
    assert "Title: Test Book" in out
    assert "EPUB version: 3.0" in out
    assert "HTML: 2" in out
    assert "All files: 7" in out
    assert "Navigation: nav.xhtml" in out
    assert "Cover: images/cover.png (png, 4x3)" in out


def test_ls_category(epub_path: Path, capsys) -> None:
    assert main(["ls", str(epub_path), "--category", "images"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == ["images/cover.png\tIMAGE_PNG\tbinary\timage/png"]


def test_ls_all(epub_dir: Path, capsys) -> None:
    assert main(["ls", str(epub_dir)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 7
    assert "media/clip.mp4\tOTHER\tbinary\tvideo/mp4" in lines


def test_cat_to_file(epub_path: Path, tmp_path: Path) -> None:
    output = tmp_path / "out.css"
    assert main(["cat", str(epub_path), "styles/book.css", "-o", str(output)]) == 0
    assert output.read_bytes() == BOOK_CSS


def test_cat_unknown_href(epub_path: Path, capsys) -> None:
    assert main(["cat", str(epub_path), "nope.xhtml"]) == 1
    assert "No manifest item" in capsys.readouterr().err


def test_cat_missing_file_reports_error(tmp_path: Path, capsys) -> None:
    path = tmp_path / "broken.epub"
    path.write_bytes(build_zip(book_files({"OEBPS/styles/book.css": None})))
    assert main(["cat", str(path), "styles/book.css", "-o", str(tmp_path / "x")]) == 1
    assert "was not found in the EPUB file" in capsys.readouterr().err


def test_cat_ignore_missing(tmp_path: Path) -> None:
    path = tmp_path / "broken.epub"
    path.write_bytes(build_zip(book_files({"OEBPS/styles/book.css": None})))
    output = tmp_path / "x.css"
    assert main(["--ignore-missing", "cat", str(path), "styles/book.css", "-o", str(output)]) == 0
    assert output.read_bytes() == b""


def test_missing_book(tmp_path: Path, capsys) -> None:
    assert main(["info", str(tmp_path / "missing.epub")]) == 1
    assert "Error:" in capsys.readouterr().err


def test_corrupt_book(tmp_path: Path, capsys) -> None:
    path = tmp_path / "corrupt.epub"
    path.write_bytes(b"not a zip at all")
    assert main(["info", str(path)]) == 1
    assert "Error:" in capsys.readouterr().err


def test_cat_text_decodes_with_fallback_encoding(epub_path: Path, tmp_path: Path) -> None:
    output = tmp_path / "chapter.xhtml"
    assert main(["cat", str(epub_path), "text/chapter 1.xhtml", "--text", "-o", str(output)]) == 0
    assert "Café" in output.read_text(encoding="utf-8")

    assert main(["--encoding", "latin-1", "cat", str(epub_path), "text/chapter 1.xhtml", "--text", "-o", str(output)]) == 0
    assert "CafÃ©" in output.read_text(encoding="utf-8")


def test_cat_text_rejects_binary_item(epub_path: Path, capsys) -> None:
    assert main(["cat", str(epub_path), "images/cover.png", "--text"]) == 1
    assert "Not a text file" in capsys.readouterr().err


def test_unknown_encoding_is_an_error(epub_path: Path, capsys) -> None:
    assert main(["--encoding", "no-such-codec", "cat", str(epub_path), "text/chapter 1.xhtml", "--text"]) == 1
    assert "Unknown text encoding: no-such-codec" in capsys.readouterr().err
