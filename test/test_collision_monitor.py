import pytest

from active_explorer.collision_monitor import CollisionMonitor
from active_explorer.errors import SensorUnavailableError
from active_explorer.trajectory import synthesize

from conftest import FakePathfinder


def straight_trajectory(length=8):
    return synthesize([(float(i), 0.0, 1.0) for i in range(length)])


def distance_with_obstacle_at(x_blocked):
    """Reports 0.1 m clearance at x == x_blocked and 3 m everywhere else."""
    def distance(point):
        if abs(point[0] - x_blocked) < 1e-9:
            return True, 0.1
        return True, 3.0
    return distance


@pytest.mark.parametrize("blocked", [2, 3, 4, 5])
def test_single_occupied_sample_in_window_aborts(blocked):
    monitor = CollisionMonitor(FakePathfinder(distance_fn=distance_with_obstacle_at(blocked)), robot_radius=0.5)
    assert monitor.check_for_abort(2, straight_trajectory()) is True


def test_all_clear_window_does_not_abort():
    pathfinder = FakePathfinder(distance_fn=lambda p: (True, 0.5))
    monitor = CollisionMonitor(pathfinder, robot_radius=0.5)

    assert monitor.check_for_abort(2, straight_trajectory()) is False
    assert [q[0] for q in pathfinder.distance_queries] == [2.0, 3.0, 4.0, 5.0]


def test_samples_outside_lookahead_are_ignored():
    monitor = CollisionMonitor(FakePathfinder(distance_fn=distance_with_obstacle_at(6)), robot_radius=0.5)
    assert monitor.check_for_abort(2, straight_trajectory()) is False
    assert monitor.check_for_abort(3, straight_trajectory()) is True


def test_window_is_truncated_at_trajectory_end():
    pathfinder = FakePathfinder(distance_fn=lambda p: (True, 2.0))
    monitor = CollisionMonitor(pathfinder, robot_radius=0.5)

    assert monitor.check_for_abort(6, straight_trajectory()) is False
    assert len(pathfinder.distance_queries) == 2


def test_unknown_distance_counts_as_clear():
    monitor = CollisionMonitor(FakePathfinder(distance_fn=lambda p: (False, 0.0)), robot_radius=0.5)
    assert monitor.check_for_abort(0, straight_trajectory()) is False


def test_failed_distance_query_counts_as_clear():
    def failing(point):
        raise SensorUnavailableError("map not ready")

    monitor = CollisionMonitor(FakePathfinder(distance_fn=failing), robot_radius=0.5)
    assert monitor.check_for_abort(0, straight_trajectory()) is False
    assert len(monitor.last_result.free) == 4


def test_publishes_free_and_occupied_sets_when_visualizing(visualizer):
    monitor = CollisionMonitor(
        FakePathfinder(distance_fn=distance_with_obstacle_at(1)),
        robot_radius=0.5,
        visualizer=visualizer,
        visualize=True,
    )
    monitor.check_for_abort(0, straight_trajectory())

    channels = {call[0]: call for call in visualizer.calls}
    assert [p[0] for p in channels["occupied_path"][1]] == [1.0]
    assert channels["occupied_path"][2] == "red"
    assert [p[0] for p in channels["free_path"][1]] == [0.0, 2.0, 3.0]
    assert channels["free_path"][2] == "green"


def test_no_visualization_when_disabled(visualizer):
    monitor = CollisionMonitor(
        FakePathfinder(distance_fn=distance_with_obstacle_at(1)),
        robot_radius=0.5,
        visualizer=visualizer,
    )
    monitor.check_for_abort(0, straight_trajectory())
    assert visualizer.calls == []
