"""Official achievement rank of a student for a period.

Tiers follow the national assessment circular: graded subjects contribute
their averages for the period and pass-fail subjects their Pass/Fail status.
At least six graded subjects must have an average before any rank is given.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from hurricane.core.scores import Period, Status, round1
from hurricane.core.subjects import Subject

MIN_GRADED_WITH_DATA = 6


class Rank(str, Enum):
    EXCELLENT = "Tốt"
    GOOD = "Khá"
    PASS = "Đạt"
    FAIL = "Chưa đạt"
    INSUFFICIENT = "Chưa đủ"


@dataclass(frozen=True)
class RankTier:
    rank: Rank
    floor: float
    count_threshold: float
    max_fails: int


# Checked in order; the first satisfied tier wins.
RANK_TIERS: Tuple[RankTier, ...] = (
    RankTier(Rank.EXCELLENT, floor=6.5, count_threshold=8.0, max_fails=0),
    RankTier(Rank.GOOD, floor=5.0, count_threshold=6.5, max_fails=0),
    RankTier(Rank.PASS, floor=3.5, count_threshold=5.0, max_fails=1),
)


def _meets(tier: RankTier, averages: List[float], fail_count: int) -> bool:
    if fail_count > tier.max_fails:
        return False
    if any(v < tier.floor for v in averages):
        return False
    return sum(1 for v in averages if v >= tier.count_threshold) >= MIN_GRADED_WITH_DATA


def calculate_official_rank(subjects: Iterable[Subject], period: Period) -> Rank:
    period = Period(period)
    subjects = list(subjects)
    graded = [s for s in subjects if s.is_graded]
    pass_fail = [s for s in subjects if not s.is_graded]

    # Subjects without an average are left out of both the floor and the count checks.
    averages = [v for v in (s.average_for(period) for s in graded) if v is not None]
    if len(averages) < MIN_GRADED_WITH_DATA:
        return Rank.INSUFFICIENT

    statuses = [s.status_for(period) for s in pass_fail]
    if any(status is None for status in statuses):
        return Rank.INSUFFICIENT

    fail_count = sum(1 for status in statuses if status is Status.FAIL)
    for tier in RANK_TIERS:
        if _meets(tier, averages, fail_count):
            return tier.rank
    return Rank.FAIL


@dataclass(frozen=True)
class PeriodStats:
    gpa: float
    rank: Rank
    chart: List[Tuple[str, float]]


def period_gpa(subjects: Iterable[Subject], period: Period) -> float:
    values = [v for v in (s.average_for(period) for s in subjects if s.is_graded) if v is not None]
    if not values:
        return 0.0
    return round1(sum(values) / len(values))


def period_stats(subjects: Iterable[Subject], period: Period) -> PeriodStats:
    subjects = list(subjects)
    chart: List[Tuple[str, float]] = []
    for s in subjects:
        value: Optional[float] = s.average_for(period) if s.is_graded else None
        if value is not None:
            chart.append((s.name, value))
    return PeriodStats(
        gpa=period_gpa(subjects, period),
        rank=calculate_official_rank(subjects, period),
        chart=chart,
    )
