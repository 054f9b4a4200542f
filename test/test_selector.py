import math

import numpy as np
import pytest

from active_explorer.frontier import AttemptedSet, Frontier
from active_explorer.selector import FrontierSelector, NO_TARGET, is_no_target, select_best


def frontiers(*centers):
    return [Frontier(center=c) for c in centers]


def test_prefers_frontier_ahead_then_returns_sentinel_once_attempted():
    attempted = AttemptedSet(cell_size=0.2)
    a, b = (10.0, 0.0, 0.0), (-10.0, 0.0, 0.0)

    best = select_best((0, 0, 0), 0.0, frontiers(a, b), attempted)
    assert best.tolist() == list(a)

    attempted.mark(best)
    best = select_best((0, 0, 0), 0.0, frontiers(a), attempted)
    assert is_no_target(best, 0.2)
    assert best.tolist() == NO_TARGET.tolist()


def test_score_uses_heading_projection_not_distance():
    attempted = AttemptedSet(cell_size=0.2)
    # Facing +y: the closer frontier straight ahead beats the far one to the side.
    best = select_best((0, 0, 0), math.pi / 2, frontiers((20, 1, 0), (0, 5, 0)), attempted)
    assert best.tolist() == [0.0, 5.0, 0.0]


def test_score_is_relative_to_current_position():
    attempted = AttemptedSet(cell_size=0.2)
    best = select_best((8, 0, 0), 0.0, frontiers((5, 0, 0), (9, 0, 0)), attempted)
    assert best.tolist() == [9.0, 0.0, 0.0]


def test_ties_go_to_first_frontier():
    attempted = AttemptedSet(cell_size=0.2)
    best = select_best((0, 0, 0), 0.0, frontiers((4, 1, 0), (4, -1, 0)), attempted)
    assert best.tolist() == [4.0, 1.0, 0.0]


def test_frontiers_behind_are_not_selected_by_default():
    attempted = AttemptedSet(cell_size=0.2)
    best = select_best((0, 0, 0), 0.0, frontiers((-3, 0, 0), (0, 4, 0)), attempted)
    assert is_no_target(best, 0.2)


def test_lower_min_score_allows_frontiers_behind():
    attempted = AttemptedSet(cell_size=0.2)
    best = select_best((0, 0, 0), 0.0, frontiers((-3, 0, 0), (-1, 0, 0)), attempted, min_score=-math.inf)
    assert best.tolist() == [-1.0, 0.0, 0.0]


def test_never_returns_attempted_frontier_even_if_slightly_moved():
    attempted = AttemptedSet(cell_size=0.5)
    attempted.mark((6.1, 0.1, 0.1))

    best = select_best((0, 0, 0), 0.0, frontiers((6.3, 0.2, 0.2), (3, 0, 0)), attempted)
    assert best.tolist() == [3.0, 0.0, 0.0]


def test_revisit_invariant_over_repeated_selection():
    attempted = AttemptedSet(cell_size=0.2)
    selector = FrontierSelector(attempted)
    candidates = frontiers((1, 0, 0), (2, 1, 0), (3, -1, 0), (4, 2, 0), (5, 0, 0))
    chosen = []

    for _ in range(len(candidates) + 2):
        best = selector.select((0, 0, 0), 0.0, candidates)
        if is_no_target(best, 0.2):
            break
        assert best not in attempted
        chosen.append(best.tolist())
        attempted.mark(best)

    assert chosen == [[5, 0, 0], [4, 2, 0], [3, -1, 0], [2, 1, 0], [1, 0, 0]]


def test_returned_point_is_a_copy():
    attempted = AttemptedSet(cell_size=0.2)
    source = frontiers((3, 0, 0))
    best = select_best((0, 0, 0), 0.0, source, attempted)
    best[0] = 100.0
    assert source[0].center[0] == 3.0

    empty = select_best((0, 0, 0), 0.0, [], attempted)
    empty[0] = 5.0
    assert NO_TARGET[0] == 0.0


@pytest.mark.parametrize("point,expected", [
    ((0.0, 0.0, 0.0), True),
    ((0.1, 0.1, 0.0), True),
    ((0.2, 0.0, 0.0), False),
    ((5.0, 0.0, 0.0), False),
])
def test_is_no_target(point, expected):
    assert is_no_target(np.array(point), 0.2) is expected
