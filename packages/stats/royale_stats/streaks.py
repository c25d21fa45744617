from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Streaks:
    current: int
    longest_win: int
    longest_loss: int

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def compute_streaks(outcomes: Iterable[bool | None]) -> Streaks:
    """Scan outcomes oldest-first. Unknown outcomes neither extend nor break a run.

    `current` is positive for a running win streak and negative for a running
    loss streak.
    """
    win_run = 0
    loss_run = 0
    longest_win = 0
    longest_loss = 0
    last: bool | None = None

    for won in outcomes:
        if won is None:
            continue
        if won:
            win_run += 1
            loss_run = 0
            longest_win = max(longest_win, win_run)
        else:
            loss_run += 1
            win_run = 0
            longest_loss = max(longest_loss, loss_run)
        last = won

    if last is True:
        current = win_run
    elif last is False:
        current = -loss_run
    else:
        current = 0
    return Streaks(current=current, longest_win=longest_win, longest_loss=longest_loss)
