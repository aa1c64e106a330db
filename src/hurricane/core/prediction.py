from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from hurricane.core.averages import CK_WEIGHT, GK_WEIGHT, MIN_TX_COUNT
from hurricane.core.scores import ScoreEntry, clamp_score, round1
from hurricane.core.subjects import Subject

MAX_STRONG_SUBJECTS = 6


class Goal(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"


class PredictionStatus(str, Enum):
    ACHIEVED = "achieved"
    PENDING = "pending"


# goal -> (strong subject target, other subject target)
GOAL_TARGETS = {
    Goal.EXCELLENT: (9.0, 6.5),
    Goal.GOOD: (8.0, 6.5),
}


@dataclass
class PredictionTarget:
    goal: Goal = Goal.GOOD
    strong_subjects: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.goal = Goal(self.goal)
        unique: List[str] = []
        for name in self.strong_subjects:
            if name not in unique and len(unique) < MAX_STRONG_SUBJECTS:
                unique.append(name)
        self.strong_subjects = unique

    def is_strong(self, name: str) -> bool:
        return name in self.strong_subjects

    def toggle_strong(self, name: str) -> bool:
        """Flag or unflag a subject. Returns False when the strong set is already full."""
        if name in self.strong_subjects:
            self.strong_subjects.remove(name)
            return True
        if len(self.strong_subjects) >= MAX_STRONG_SUBJECTS:
            return False
        self.strong_subjects.append(name)
        return True

    def target_for(self, name: str) -> float:
        return target_average(self.goal, self.is_strong(name))


@dataclass(frozen=True)
class SemesterNeeds:
    tx: Optional[float] = None
    gk: Optional[float] = None
    ck: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return self.tx is None and self.gk is None and self.ck is None


@dataclass(frozen=True)
class Prediction:
    subject_name: str
    target: float
    status: PredictionStatus
    hk1: Optional[SemesterNeeds] = None
    hk2: Optional[SemesterNeeds] = None
    comment: str = ""


def target_average(goal: Goal, strong: bool) -> float:
    strong_target, other_target = GOAL_TARGETS[Goal(goal)]
    return strong_target if strong else other_target


def required_second_semester(avg1: float, target: float) -> float:
    """Semester-2 average that lifts the yearly average, (avg1 + 2*avg2) / 3, to the target."""
    return max(0.0, round1((3 * target - avg1) / 2))


def predict_for_semester(entry: ScoreEntry, target: float) -> SemesterNeeds:
    txs = entry.filled_tx
    tx_count = max(MIN_TX_COUNT, len(txs))
    current_sum = sum(txs)
    total_needed = target * (tx_count + GK_WEIGHT + CK_WEIGHT)

    if entry.gk is None and entry.ck is None:
        remaining_tx = max(0, MIN_TX_COUNT - len(txs))
        # Same score asked of every remaining slot, weighted 1 per TX, 2 for GK, 3 for CK.
        per_slot = clamp_score(round1((total_needed - current_sum) / (remaining_tx + GK_WEIGHT + CK_WEIGHT)))
        return SemesterNeeds(tx=per_slot if remaining_tx > 0 else None, gk=per_slot, ck=per_slot)

    if entry.gk is not None and entry.ck is None:
        current_with_gk = current_sum + entry.gk * GK_WEIGHT
        return SemesterNeeds(ck=clamp_score(round1((total_needed - current_with_gk) / CK_WEIGHT)))

    return SemesterNeeds()


def predict_full_year(subject: Subject, target: float) -> Optional[Prediction]:
    """Scores still needed this year for a graded subject to reach ``target``.

    Pass-fail subjects have nothing to predict and yield None.
    """
    if not subject.is_graded:
        return None

    name = subject.name
    if subject.overall_avg is not None and subject.overall_avg >= target:
        return Prediction(
            subject_name=name,
            target=target,
            status=PredictionStatus.ACHIEVED,
            comment=f"Chúc mừng! Bạn đã đạt mục tiêu môn {name}. Hãy tiếp tục duy trì phong độ này.",
        )

    hk1_needs: Optional[SemesterNeeds] = None
    hk2_needs: Optional[SemesterNeeds] = None
    comment = ""

    if subject.avg1 is None:
        hk1_needs = predict_for_semester(subject.hk1, target)
        hk2_needs = SemesterNeeds(tx=target, gk=target, ck=target)
        comment = f"Bạn cần tập trung ngay từ Học kì I. Mục tiêu trung bình mỗi kì là {target}."
    elif subject.avg2 is None:
        needed = required_second_semester(subject.avg1, target)
        hk2_needs = predict_for_semester(subject.hk2, needed)
        if subject.avg1 >= target:
            comment = f"Học kì I tốt ({subject.avg1}). HK II chỉ cần duy trì khoảng {needed} để đạt mục tiêu."
        else:
            comment = f"Học kì I hơi thấp ({subject.avg1}). Bạn cần bứt phá ở HK II với điểm trung bình {needed}."
    else:
        comment = (
            f"Kết quả cả năm ({subject.overall_avg}) chưa đạt mục tiêu {target}. "
            "Hãy cố gắng hơn ở năm học tới!"
        )

    return Prediction(
        subject_name=name,
        target=target,
        status=PredictionStatus.PENDING,
        hk1=hk1_needs,
        hk2=hk2_needs,
        comment=comment,
    )


def predict_subjects(subjects: Iterable[Subject], prediction_target: PredictionTarget) -> List[Prediction]:
    results: List[Prediction] = []
    for subject in subjects:
        prediction = predict_full_year(subject, prediction_target.target_for(subject.name))
        if prediction is not None:
            results.append(prediction)
    return results
