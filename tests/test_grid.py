"""Tests for the Grid module."""

import numpy as np
import pytest

from power_snake.grid import CellType, Coordinate, Grid, WallMode
from power_snake.snake import Direction


class TestCoordinate:
    def test_equality_on_both_fields(self):
        assert Coordinate(3, 4) == Coordinate(3, 4)
        assert Coordinate(3, 4) != Coordinate(4, 3)

    def test_shifted(self):
        assert Coordinate(5, 5).shifted(Direction.RIGHT) == Coordinate(6, 5)
        assert Coordinate(5, 5).shifted(Direction.UP) == Coordinate(5, 4)


class TestGridInit:
    def test_default_dimensions(self):
        grid = Grid()
        assert grid.size == 20
        assert grid.wall_mode == WallMode.DEATH

    def test_minimum_size_enforced(self):
        with pytest.raises(ValueError, match="at least 4"):
            Grid(size=3)


class TestGridOperations:
    def test_in_bounds(self):
        grid = Grid(size=5)
        assert grid.in_bounds(Coordinate(0, 0))
        assert grid.in_bounds(Coordinate(4, 4))
        assert not grid.in_bounds(Coordinate(-1, 0))
        assert not grid.in_bounds(Coordinate(0, 5))
        assert not grid.in_bounds(Coordinate(5, 0))

    def test_wrap(self):
        grid = Grid(size=5)
        assert grid.wrap(Coordinate(-1, 0)) == Coordinate(4, 0)
        assert grid.wrap(Coordinate(0, -1)) == Coordinate(0, 4)
        assert grid.wrap(Coordinate(5, 5)) == Coordinate(0, 0)

    def test_occupancy_mask(self):
        grid = Grid(size=4)
        mask = grid.occupancy({Coordinate(1, 2), Coordinate(9, 9)})
        assert mask.shape == (4, 4)
        assert mask[2, 1]
        assert mask.sum() == 1

    def test_free_cells(self):
        grid = Grid(size=4)
        assert len(grid.free_cells(set())) == 16
        free = grid.free_cells({Coordinate(0, 0), Coordinate(1, 1)})
        assert len(free) == 14
        assert Coordinate(0, 0) not in free
        assert free[0] == Coordinate(1, 0)


class TestGridRender:
    def test_render_cells(self):
        grid = Grid(size=5)
        cells = grid.render(
            [[Coordinate(2, 2), Coordinate(1, 2)]],
            food=Coordinate(4, 0),
            pickup=Coordinate(0, 4),
        )
        assert cells[2, 2] == CellType.SNAKE
        assert cells[2, 1] == CellType.SNAKE
        assert cells[0, 4] == CellType.FOOD
        assert cells[4, 0] == CellType.PICKUP
        assert np.count_nonzero(cells) == 4


class TestGridSerialization:
    def test_to_dict_structure(self):
        grid = Grid(size=5, wall_mode=WallMode.WRAP)
        assert grid.to_dict() == {"size": 5, "wall_mode": "wrap"}
