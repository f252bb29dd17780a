import logging

import pytest

from pdflayout_lib.log_utils import (
    ContextFilter,
    RichLogFormatter,
    enable_debug_topics,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for h in root.handlers[:]:
        root.removeHandler(h)
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
    for topic in ("layout", "outline", "classify"):
        logging.getLogger(f"pdflayout.{topic}").setLevel(logging.NOTSET)


def make_record(name="pdflayout.outline", level=logging.WARNING, msg="hello"):
    return logging.LogRecord(name, level, __file__, 1, msg, None, None)


def test_formatter_prefixes_level_and_topic():
    out = RichLogFormatter().format(make_record(msg="one\ntwo"))
    assert out == "WARNI:outlin: one\nWARNI:outlin: two"


def test_formatter_with_context_and_color():
    record = make_record(name="pdflayout", level=logging.INFO)
    ContextFilter("doc.pdf").filter(record)
    out = RichLogFormatter(use_color=True).format(record)
    assert "[doc.pdf]" in out
    assert out.startswith("\033[38;5;111mINFO ")


def test_enable_debug_topics_by_prefix():
    enabled = enable_debug_topics("pdflayout", "out, cl")
    assert enabled == {"outline", "classify"}
    assert logging.getLogger("pdflayout.outline").level == logging.DEBUG
    assert logging.getLogger("pdflayout.layout").level == logging.NOTSET


def test_enable_all_debug_topics():
    assert "layout" in enable_debug_topics("pdflayout", "all")


def test_setup_logging_file_handler(tmp_path):
    log_file = tmp_path / "run.log"
    setup_logging("pdflayout", level=logging.INFO, log_file=str(log_file))
    logging.getLogger("pdflayout.api").info("written")
    for h in logging.getLogger().handlers:
        h.flush()
    assert "INFO :api   : written" in log_file.read_text()
    assert logging.getLogger("pdfminer").level == logging.WARNING
