import pytest

from semaninha.core.geometry import cell_box, resolve
from semaninha.errors import InvalidGridSpec
from semaninha.models.collage import GridSpec


def test_resolve_5x5_cell_count():
    assert resolve("5x5", 1200).cell_count == 25


def test_resolve_10x10_cell_size():
    assert resolve("10x10", 1200).cell_size == 120


def test_resolve_borders_and_totals_at_1200():
    g = resolve("3x3", 1200)
    assert g.interior_padding == pytest.approx(30)
    assert g.bottom_caption_padding == pytest.approx(7.2)
    assert g.total_width == pytest.approx(1260)
    assert g.total_height == pytest.approx(1200 + 30 + 7.2 + 50)


def test_resolve_small_canvas_uses_padding_floors():
    g = resolve("3x3", 300)
    assert g.interior_padding == 20
    assert g.bottom_caption_padding == 5
    assert g.total_width == 340
    assert g.total_height == 375


@pytest.mark.parametrize("text", ["notagrid", "", "3x", "x3", "0x0", "3x4", "-3x-3", "3.5x3.5"])
def test_resolve_rejects_bad_grid(text):
    with pytest.raises(InvalidGridSpec):
        resolve(text, 1200)


def test_invalid_grid_is_a_value_error():
    with pytest.raises(ValueError):
        resolve("notagrid", 1200)


def test_resolve_rejects_grid_larger_than_canvas():
    with pytest.raises(InvalidGridSpec):
        resolve("50x50", 40)


def test_resolve_rejects_non_positive_canvas():
    with pytest.raises(InvalidGridSpec):
        resolve("3x3", 0)


def test_grid_spec_parse_is_lenient_about_case_and_spaces():
    assert GridSpec.parse(" 7X7 ") == GridSpec(7)
    assert str(GridSpec.parse("7x7")) == "7x7"
    assert GridSpec(4).cell_count == 16


def test_resolve_accepts_parsed_spec():
    assert resolve(GridSpec(4), 400).cell_size == 100


def test_cell_box_row_major():
    g = resolve("3x3", 300)
    assert cell_box(0, g) == (0, 0, 100, 100)
    assert cell_box(4, g) == (100, 100, 200, 200)
    assert cell_box(5, g) == (200, 100, 300, 200)
    assert cell_box(8, g) == (200, 200, 300, 300)


def test_cell_boxes_tile_the_canvas_without_gaps():
    g = resolve("7x7", 1000)
    for i in range(g.cell_count - 1):
        left, top, right, bottom = cell_box(i, g)
        if (i + 1) % g.columns:
            assert cell_box(i + 1, g)[0] == right
    assert cell_box(g.cell_count - 1, g)[2:] == (1000, 1000)
