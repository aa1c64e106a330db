from dataclasses import dataclass, field

from hurricane.core.prediction import PredictionTarget
from hurricane.core.schedule import WeeklySchedule
from hurricane.core.scores import Period
from hurricane.core.subjects import SubjectCollection
from hurricane.state.session_state import SessionState

THEMES = ("default", "tet")


@dataclass
class AppState:
    session: SessionState = field(default_factory=SessionState)
    subjects: SubjectCollection = field(default_factory=SubjectCollection)
    schedule: WeeklySchedule = field(default_factory=WeeklySchedule)
    prediction: PredictionTarget = field(default_factory=PredictionTarget)
    redeemed_cycles: int = 0
    theme: str = "default"
    active_period: Period = Period.HK1

    @property
    def has_subjects(self) -> bool:
        return len(self.subjects) > 0
