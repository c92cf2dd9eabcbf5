"""Tests for the canonical chart layout."""

import dataclasses

import numpy as np
import pytest

from colorchecker.chart_geometry import ChartGeometry, MACBETH_24


def test_layout_sizes():
    assert len(MACBETH_24.outer_corners) == 4
    assert MACBETH_24.cell_count == 24
    assert MACBETH_24.cell_size == pytest.approx(1.25)


def test_cells_are_row_major():
    centers = MACBETH_24.cell_centers
    assert centers[0] == (1.50, 1.50)
    assert centers[5] == (15.25, 1.50)
    assert centers[6] == (1.50, 4.25)
    assert centers[23] == (15.25, 9.75)


def test_cells_lie_inside_the_chart():
    width, height = MACBETH_24.outer_corners[2]
    for index in range(MACBETH_24.cell_count):
        corners = MACBETH_24.cell_corners(index)
        assert corners[:, 0].min() > 0 and corners[:, 0].max() < width
        assert corners[:, 1].min() > 0 and corners[:, 1].max() < height


def test_cell_corners_square():
    corners = MACBETH_24.cell_corners(7)
    assert corners.shape == (4, 2)
    assert np.allclose(corners.mean(axis=0), MACBETH_24.cell_centers[7])
    assert corners[1, 0] - corners[0, 0] == pytest.approx(1.25)
    assert corners[2, 1] - corners[1, 1] == pytest.approx(1.25)


def test_layout_is_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        MACBETH_24.cell_size = 2.0


def test_invalid_layouts_are_rejected():
    with pytest.raises(ValueError):
        ChartGeometry(outer_corners=((0, 0), (1, 0), (1, 1)),
                      cell_centers=MACBETH_24.cell_centers, cell_size=1.0)
    with pytest.raises(ValueError):
        ChartGeometry(outer_corners=MACBETH_24.outer_corners,
                      cell_centers=MACBETH_24.cell_centers[:20], cell_size=1.0)
