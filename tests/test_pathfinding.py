"""Unit tests for the grid pathfinder."""

from schema_diagram.engine import Bounds, Rect, find_path, smooth_path
from schema_diagram.engine.pathfinding import OpenList, _Node, is_blocked, snap


def test_snap_rounds_half_up():
    assert snap(9) == 0
    assert snap(10) == 20
    assert snap(31) == 40
    assert snap(50, cell_size=25) == 50


def test_straight_route_without_obstacles():
    path = find_path((0, 0), (100, 0), [], Bounds(500, 500))
    assert path[0] == (0, 0)
    assert path[-1] == (100, 0)
    assert all(y == 0 for _, y in path)
    assert smooth_path(path) == [(0, 0), (100, 0)]


def test_route_steps_are_orthogonal_grid_moves():
    path = find_path((0, 0), (100, 60), [], Bounds(500, 500))
    for (x1, y1), (x2, y2) in zip(path, path[1:]):
        assert abs(x2 - x1) + abs(y2 - y1) == 20
    assert len(path) == 1 + (100 + 60) // 20


def test_route_avoids_buffered_obstacle():
    obstacle = Rect(160, 120, 80, 160)
    path = find_path((40, 200), (400, 200), [obstacle], Bounds(600, 600))

    assert len(path) >= 2
    assert path[0] == (40, 200)
    assert path[-1] == (400, 200)
    for x, y in path:
        assert not (140 < x < 260 and 100 < y < 300)


def test_endpoints_are_reanchored_off_grid():
    path = find_path((13, 7), (187, 7), [], Bounds(500, 500))
    assert path[0] == (13, 7)
    assert path[-1] == (187, 7)
    assert path[1] == (20, 0)
    assert path[-2] == (180, 0)


def test_unreachable_goal_falls_back_to_direct_segment():
    walled_in = Rect(250, 250, 100, 100)
    path = find_path((20, 20), (300, 300), [walled_in], Bounds(400, 400))
    assert path == [(20, 20), (300, 300)]


def test_nodes_stay_inside_canvas_bounds():
    # the obstacle leaves no room above, so the route has to pass below it
    obstacle = Rect(100, 0, 40, 100)
    path = find_path((40, 40), (200, 40), [obstacle], Bounds(300, 300))
    assert path[0] == (40, 40) and path[-1] == (200, 40)
    for x, y in path:
        assert 0 <= x <= 300 and 0 <= y <= 300
    assert max(y for _, y in path) > 120


def test_same_start_and_end_still_gives_two_points():
    path = find_path((40, 40), (40, 40), [], Bounds(100, 100))
    assert len(path) == 2
    assert path[0] == path[-1] == (40, 40)


def test_is_blocked_uses_inclusive_buffer():
    rect = Rect(100, 100, 50, 50)
    assert is_blocked(80, 80, [rect], 20)
    assert is_blocked(170, 170, [rect], 20)
    assert not is_blocked(60, 125, [rect], 20)
    assert not is_blocked(125, 171, [rect], 20)


def test_rect_from_dict():
    assert Rect.from_dict({"x": 1, "y": 2, "width": 3, "height": 4}) == Rect(1, 2, 3, 4)


def test_ties_go_to_first_discovered_node():
    """Test +x is explored before +y when both have the same cost."""
    path = find_path((0, 0), (20, 20), [], Bounds(20, 20))
    assert path == [(0, 0), (20, 0), (20, 20)]


def test_detour_around_obstacle_is_shortest_and_repeatable():
    """Test the route costs the straight distance plus the detour over the buffered card."""
    obstacle = Rect(80, 60, 40, 80)
    first = find_path((0, 100), (200, 100), [obstacle], Bounds(400, 400))
    second = find_path((0, 100), (200, 100), [obstacle], Bounds(400, 400))

    # 200 across plus 80 out and 80 back around the buffered card
    assert len(first) == 1 + (200 + 160) // 20
    for (x1, y1), (x2, y2) in zip(first, first[1:]):
        assert abs(x2 - x1) + abs(y2 - y1) == 20
    for x, y in first:
        assert not is_blocked(x, y, [obstacle])
    assert first == second


def test_open_node_is_relaxed_in_place():
    open_list = OpenList()
    parent = _Node(20, 0, 0, 0)
    stored = open_list.push_or_relax(_Node(40, 0, 60, 20))

    assert open_list.push_or_relax(_Node(40, 0, 20, 20, parent)) is stored
    assert len(open_list) == 1
    assert stored.g == 20
    assert stored.f == 40
    assert stored.parent is parent


def test_costlier_path_does_not_replace_open_node():
    open_list = OpenList()
    stored = open_list.push_or_relax(_Node(40, 0, 20, 20))
    open_list.push_or_relax(_Node(40, 0, 60, 20, _Node(0, 0, 0, 0)))
    assert len(open_list) == 1
    assert stored.g == 20
    assert stored.parent is None


def test_open_list_prefers_earlier_node_on_equal_f():
    open_list = OpenList()
    first = open_list.push_or_relax(_Node(20, 0, 20, 20))
    open_list.push_or_relax(_Node(0, 20, 20, 20))
    assert open_list.peek_best() is first

    cheaper = open_list.push_or_relax(_Node(40, 40, 0, 10))
    assert open_list.peek_best() is cheaper
    open_list.remove(cheaper)
    assert open_list.get(40, 40) is None
    assert open_list.peek_best() is first
