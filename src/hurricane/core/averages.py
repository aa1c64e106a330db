from __future__ import annotations

from hurricane.core.scores import PASS_FAIL_SLOTS, ScoreEntry, Status, round1

MIN_TX_COUNT = 3
GK_WEIGHT = 2
CK_WEIGHT = 3


def semester_average(entry: ScoreEntry) -> float | None:
    """Weighted semester average of a graded subject.

    Needs at least three TX scores plus GK and CK; every filled TX counts.
    """
    txs = entry.filled_tx
    if len(txs) < MIN_TX_COUNT or entry.gk is None or entry.ck is None:
        return None
    weighted = sum(txs) + entry.gk * GK_WEIGHT + entry.ck * CK_WEIGHT
    weight = len(txs) + GK_WEIGHT + CK_WEIGHT
    return round1(weighted / weight)


def semester_status(entry: ScoreEntry) -> Status | None:
    values = entry.slots(PASS_FAIL_SLOTS)
    if any(v is None for v in values):
        return None
    return Status.PASS if all(v == 1 for v in values) else Status.FAIL


def yearly_average(avg1: float | None, avg2: float | None) -> float | None:
    if avg1 is None or avg2 is None:
        return None
    return round1((avg1 + avg2 * 2) / 3)


def yearly_status(status1: Status | None, status2: Status | None) -> Status | None:
    # Only the second semester decides the year for pass-fail subjects.
    return status2
