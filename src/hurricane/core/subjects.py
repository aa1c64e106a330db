from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Iterator, List, Optional, Union

from hurricane.core.averages import semester_average, semester_status, yearly_average, yearly_status
from hurricane.core.catalog import graded_comment, pass_fail_comment, priority_of, subject_type_for
from hurricane.core.scores import Period, ScoreEntry, Semester, Status, SubjectType


@dataclass(frozen=True)
class GradedResults:
    avg1: Optional[float] = None
    avg2: Optional[float] = None
    overall_avg: Optional[float] = None


@dataclass(frozen=True)
class PassFailResults:
    status1: Optional[Status] = None
    status2: Optional[Status] = None

    @property
    def yearly_status(self) -> Optional[Status]:
        return yearly_status(self.status1, self.status2)


SubjectResults = Union[GradedResults, PassFailResults]


def derive_results(subject_type: SubjectType, hk1: ScoreEntry, hk2: ScoreEntry) -> SubjectResults:
    if subject_type is SubjectType.GRADED:
        avg1 = semester_average(hk1)
        avg2 = semester_average(hk2)
        return GradedResults(avg1=avg1, avg2=avg2, overall_avg=yearly_average(avg1, avg2))
    return PassFailResults(status1=semester_status(hk1), status2=semester_status(hk2))


def new_subject_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class Subject:
    """One subject's raw scores for both semesters plus the results derived from them.

    Subjects are immutable; edits go through ``with_score`` which returns a new
    value with freshly derived results, so results never lag the raw entries.
    """

    id: str
    name: str
    type: SubjectType
    hk1: ScoreEntry = field(default_factory=ScoreEntry)
    hk2: ScoreEntry = field(default_factory=ScoreEntry)
    results: SubjectResults = field(init=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", SubjectType(self.type))
        object.__setattr__(self, "results", derive_results(self.type, self.hk1, self.hk2))

    @classmethod
    def create(cls, name: str, subject_type: SubjectType | None = None) -> "Subject":
        return cls(id=new_subject_id(), name=name, type=subject_type or subject_type_for(name))

    @property
    def is_graded(self) -> bool:
        return self.type is SubjectType.GRADED

    @property
    def avg1(self) -> Optional[float]:
        return self.results.avg1 if isinstance(self.results, GradedResults) else None

    @property
    def avg2(self) -> Optional[float]:
        return self.results.avg2 if isinstance(self.results, GradedResults) else None

    @property
    def overall_avg(self) -> Optional[float]:
        return self.results.overall_avg if isinstance(self.results, GradedResults) else None

    @property
    def status1(self) -> Optional[Status]:
        return self.results.status1 if isinstance(self.results, PassFailResults) else None

    @property
    def status2(self) -> Optional[Status]:
        return self.results.status2 if isinstance(self.results, PassFailResults) else None

    def entry(self, semester: Semester) -> ScoreEntry:
        return self.hk1 if Semester(semester) is Semester.HK1 else self.hk2

    def with_score(self, semester: Semester, slot: str, value: Optional[float]) -> "Subject":
        semester = Semester(semester)
        updated = self.entry(semester).with_value(slot, value)
        return replace(self, **{semester.value: updated})

    def average_for(self, period: Period) -> Optional[float]:
        period = Period(period)
        if period is Period.HK1:
            return self.avg1
        if period is Period.HK2:
            return self.avg2
        return self.overall_avg

    def status_for(self, period: Period) -> Optional[Status]:
        if not isinstance(self.results, PassFailResults):
            return None
        if Period(period) is Period.HK1:
            return self.results.status1
        if Period(period) is Period.HK2:
            return self.results.status2
        return self.results.yearly_status

    def comment_for(self, period: Period) -> str:
        if self.is_graded:
            return graded_comment(self.average_for(period))
        return pass_fail_comment(self.status_for(period))

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "hk1": self.hk1.to_dict(),
            "hk2": self.hk2.to_dict(),
            "avg1": self.avg1,
            "avg2": self.avg2,
            "overall_avg": self.overall_avg,
            "status1": self.status1.value if self.status1 else None,
            "status2": self.status2.value if self.status2 else None,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Subject":
        # Stored results are ignored; they are always rederived from the raw entries.
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            type=SubjectType(data.get("type") or subject_type_for(str(data["name"]))),
            hk1=ScoreEntry.from_dict(data.get("hk1")),
            hk2=ScoreEntry.from_dict(data.get("hk2")),
        )


class SubjectCollection:
    """Subjects keyed by id. Iteration follows the fixed display priority."""

    def __init__(self, subjects: Iterable[Subject] = ()) -> None:
        self._items: Dict[str, Subject] = {}
        for subject in subjects:
            self._items[subject.id] = subject

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "SubjectCollection":
        return cls(Subject.create(name) for name in names)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Subject]:
        return iter(self.sorted())

    def __contains__(self, subject_id: object) -> bool:
        return subject_id in self._items

    def get(self, subject_id: str) -> Optional[Subject]:
        return self._items.get(subject_id)

    def by_name(self, name: str) -> Optional[Subject]:
        return next((s for s in self._items.values() if s.name == name), None)

    def replace(self, subject: Subject) -> None:
        if subject.id not in self._items:
            raise KeyError(subject.id)
        self._items[subject.id] = subject

    def sorted(self) -> List[Subject]:
        return sorted(self._items.values(), key=lambda s: priority_of(s.name))

    def graded(self) -> List[Subject]:
        return [s for s in self.sorted() if s.is_graded]

    def pass_fail(self) -> List[Subject]:
        return [s for s in self.sorted() if not s.is_graded]

    def to_list(self) -> List[Dict]:
        return [s.to_dict() for s in self._items.values()]

    @classmethod
    def from_list(cls, rows: Iterable[Dict]) -> "SubjectCollection":
        return cls(Subject.from_dict(row) for row in rows)
