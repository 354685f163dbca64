"""Tests for the waypoint sampling policy."""
from voyagerisk.modules.sampling import sample_waypoints


class TestSampleWaypoints:
    def test_hundred_points_target_five(self):
        route = list(range(100))
        sampled = sample_waypoints(route, 5)
        assert sampled == [0, 20, 40, 60, 80]
        assert sampled[0] == route[0]

    def test_empty_route(self):
        assert sample_waypoints([], 5) == []

    def test_single_point(self):
        assert sample_waypoints(["a"], 5) == ["a"]

    def test_fewer_points_than_target_keeps_all(self):
        assert sample_waypoints(list(range(7)), 5) == list(range(7))

    def test_stride_remainder(self):
        # 10 // 3 = 3 → indices 0, 3, 6, 9
        assert sample_waypoints(list(range(10)), 3) == [0, 3, 6, 9]

    def test_order_preserved(self):
        route = ["z", "y", "x", "w", "v", "u"]
        assert sample_waypoints(route, 3) == ["z", "x", "v"]

    def test_non_positive_target_keeps_first_only(self):
        assert sample_waypoints(list(range(10)), 0) == [0]
        assert sample_waypoints(list(range(10)), -3) == [0]

    def test_accepts_tuple_input(self):
        assert sample_waypoints((1, 2, 3, 4), 2) == [1, 3]
