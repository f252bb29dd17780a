import pytest

from pdflayout_lib.models import Line
from pdflayout_lib.segmenter import ContentSegmenter

from conftest import make_run


@pytest.fixture
def segmenter(config):
    return ContentSegmenter(config)


def lines_at(*specs):
    """Builds single-run lines from (y, size) pairs."""
    return [Line([make_run(f"line at {y}", x=72, y=y, size=size)]) for y, size in specs]


def test_consecutive_lines_form_one_block(segmenter):
    blocks = segmenter.segment_column(lines_at((100, 12), (115, 12), (130, 12)), 12)
    assert len(blocks) == 1
    assert len(blocks[0].lines) == 3
    assert blocks[0].kind is None


def test_large_vertical_gap_starts_new_block(segmenter):
    # Threshold is 12 * 1.5 * 1.3 = 23.4
    blocks = segmenter.segment_column(lines_at((100, 12), (123, 12), (147, 12)), 12)
    assert [len(b.lines) for b in blocks] == [2, 1]


def test_font_size_jump_starts_new_block(segmenter):
    blocks = segmenter.segment_column(lines_at((100, 18), (120, 12), (135, 12)), 12)
    assert [len(b.lines) for b in blocks] == [1, 2]


def test_small_font_change_keeps_block(segmenter):
    # 1.5 is below 12 * 0.15 = 1.8
    blocks = segmenter.segment_column(lines_at((100, 12), (115, 13.5)), 12)
    assert len(blocks) == 1


def test_empty_column(segmenter):
    assert segmenter.segment_column([], 12) == []
