"""Unit tests for path simplification and SVG emission."""

from schema_diagram.engine import smooth_path, to_svg_path


def test_collinear_points_are_dropped():
    path = [(0, 0), (20, 0), (40, 0), (40, 20), (40, 40), (60, 40)]
    assert smooth_path(path) == [(0, 0), (40, 0), (40, 40), (60, 40)]


def test_short_paths_unchanged():
    assert smooth_path([]) == []
    assert smooth_path([(1, 1)]) == [(1, 1)]
    assert smooth_path([(0, 0), (5, 5)]) == [(0, 0), (5, 5)]


def test_smoothing_is_idempotent():
    path = [(0, 0), (20, 0), (40, 0), (40, 20), (20, 20), (20, 40), (20, 60),
            (40, 60), (60, 60), (60, 60), (60, 40)]
    once = smooth_path(path)
    assert smooth_path(once) == once


def test_reversal_is_kept():
    path = [(0, 0), (40, 0), (20, 0)]
    assert smooth_path(path) == path


def test_svg_path_empty_and_single_point():
    assert to_svg_path([]) == ""
    assert to_svg_path([(3, 4)]) == "M 3 4"


def test_svg_path_formats_numbers():
    assert to_svg_path([(0, 0), (20.0, 0), (20, 12.5)]) == "M 0 0 L 20 0 L 20 12.5"
