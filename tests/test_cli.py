import logging

import pytest

import pdflayout
from pdflayout import Application
from pdflayout_lib.extractor import ExtractionError

from conftest import FakeSource
from test_api import TITLE_HTML


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers = root.handlers[:]
    yield
    for h in root.handlers[:]:
        root.removeHandler(h)
    for h in handlers:
        root.addHandler(h)


@pytest.fixture
def fake_pdf(mocker, title_page):
    mock_source_cls = mocker.patch("pdflayout.PDFMinerSource")
    mock_source_cls.return_value.__enter__.return_value = FakeSource({1: title_page})
    return mock_source_cls


def test_parse_arguments_defaults():
    args = Application.parse_arguments(["doc.pdf"])
    assert args.pages == "all"
    assert args.workers == 4
    assert args.output_file is None
    assert not args.dry_run


def test_output_file_defaults_to_pdf_name():
    args = Application.parse_arguments(["some/dir/report.pdf", "-o"])
    assert Application(args)._resolve_output_filename() == "report.html"
    args = Application.parse_arguments(["report.pdf", "-o", "out.html"])
    assert Application(args)._resolve_output_filename() == "out.html"


def test_workers_set_concurrency():
    args = Application.parse_arguments(["doc.pdf", "-w", "7"])
    assert Application(args).config.max_concurrent_pages == 7


def test_run_prints_html(fake_pdf, capsys):
    args = Application.parse_arguments(["doc.pdf"])
    assert Application(args).run() == 0
    assert capsys.readouterr().out.strip() == TITLE_HTML
    fake_pdf.assert_called_once_with("doc.pdf")


def test_run_writes_output_file(fake_pdf, tmp_path):
    out = tmp_path / "doc.html"
    args = Application.parse_arguments(["doc.pdf", "-o", str(out)])
    assert Application(args).run() == 0
    assert out.read_text(encoding="utf-8") == TITLE_HTML


def test_dry_run_prints_summary(fake_pdf, capsys):
    args = Application.parse_arguments(["doc.pdf", "-D"])
    assert Application(args).run() == 0
    out = capsys.readouterr().out
    assert "Headings" in out
    assert "<h1>" not in out


def test_bad_page_selection_fails(fake_pdf):
    args = Application.parse_arguments(["doc.pdf", "-p", "x-y"])
    assert Application(args).run() == 1
    fake_pdf.assert_not_called()


def test_extraction_error_fails(mocker):
    mock_source_cls = mocker.patch("pdflayout.PDFMinerSource")
    mock_source_cls.return_value.__enter__.side_effect = ExtractionError("bad pdf")
    args = Application.parse_arguments(["doc.pdf"])
    assert Application(args).run() == 1


def test_main_missing_file(mocker):
    mocker.patch("sys.argv", ["pdflayout.py", "/nonexistent/missing.pdf"])
    with pytest.raises(SystemExit) as exc:
        pdflayout.main()
    assert exc.value.code == 1
