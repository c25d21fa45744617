from __future__ import annotations

from royale_stats.streaks import compute_streaks


def test_empty_outcomes() -> None:
    s = compute_streaks([])
    assert (s.current, s.longest_win, s.longest_loss) == (0, 0, 0)


def test_running_win_streak() -> None:
    s = compute_streaks([False, False, True, True, True])
    assert s.current == 3
    assert s.longest_win == 3
    assert s.longest_loss == 2


def test_running_loss_streak_is_negative() -> None:
    s = compute_streaks([True, True, True, True, False, False])
    assert s.current == -2
    assert s.longest_win == 4
    assert s.longest_loss == 2


def test_unknown_outcomes_do_not_break_runs() -> None:
    s = compute_streaks([True, None, True, None, None, True])
    assert s.as_dict() == {"current": 3, "longest_win": 3, "longest_loss": 0}


def test_only_unknown_outcomes() -> None:
    assert compute_streaks([None, None]).as_dict() == {
        "current": 0,
        "longest_win": 0,
        "longest_loss": 0,
    }
