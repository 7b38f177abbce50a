# tests/unit/test_strides.py
import pytest

from ndmatrix import Layout, as_shape, derive_strides, shape_size


def test_row_major_2d():
    assert derive_strides([3, 4], Layout.ROW_MAJOR) == (4, 1)


def test_column_major_2d():
    assert derive_strides([3, 4], Layout.COLUMN_MAJOR) == (1, 3)


def test_higher_rank_strides():
    assert derive_strides([3, 4, 7], Layout.COLUMN_MAJOR) == (1, 3, 12)
    assert derive_strides([100, 100, 100], Layout.ROW_MAJOR) == (10000, 100, 1)
    assert derive_strides([10] * 6, Layout.COLUMN_MAJOR) == (1, 10, 100, 1000, 10000, 100000)
    assert derive_strides([4, 3, 7], Layout.ROW_MAJOR) == (21, 7, 1)


@pytest.mark.parametrize("shape", [(5,), (2, 3), (4, 1, 6), (2, 0, 3), (12, 23, 21, 1, 21)])
def test_stride_recurrences(shape):
    row = derive_strides(shape, Layout.ROW_MAJOR)
    assert row[-1] == 1
    for i in range(len(shape) - 1):
        assert row[i] == row[i + 1] * shape[i + 1]

    col = derive_strides(shape, Layout.COLUMN_MAJOR)
    assert col[0] == 1
    for i in range(1, len(shape)):
        assert col[i] == col[i - 1] * shape[i - 1]


def test_shape_size():
    assert shape_size((3, 4, 7)) == 3 * 4 * 7
    assert shape_size((12, 23, 21, 1, 21)) == 12 * 23 * 21 * 1 * 21
    assert shape_size((4, 0)) == 0


def test_as_shape_normalizes():
    assert as_shape(5) == (5,)
    assert as_shape([3, 4]) == (3, 4)


def test_as_shape_rejects_bad_input():
    with pytest.raises(ValueError, match="at least one dimension"):
        as_shape([])
    with pytest.raises(ValueError, match="non-negative"):
        as_shape([3, -1])
    with pytest.raises(TypeError, match="integer"):
        as_shape([3, 2.5])


@pytest.mark.parametrize("alias,expected", [
    ("row", Layout.ROW_MAJOR),
    ("C", Layout.ROW_MAJOR),
    ("Row-Major", Layout.ROW_MAJOR),
    ("column", Layout.COLUMN_MAJOR),
    ("F", Layout.COLUMN_MAJOR),
    (Layout.COLUMN_MAJOR, Layout.COLUMN_MAJOR),
])
def test_layout_parse(alias, expected):
    assert Layout.parse(alias) is expected


def test_layout_parse_unknown():
    with pytest.raises(ValueError, match="Unknown layout"):
        Layout.parse("diagonal")
