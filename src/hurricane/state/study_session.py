from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from hurricane.core.catalog import DEFAULT_SELECTION
from hurricane.core.prediction import Goal, Prediction, PredictionTarget, predict_subjects
from hurricane.core.rank import PeriodStats, period_stats
from hurricane.core.rewards import RewardClaim, claim_reward, current_bars, lifetime_bars
from hurricane.core.schedule import ScheduleEntry, WeeklySchedule
from hurricane.core.scores import Period, Semester, parse_score
from hurricane.core.subjects import Subject, SubjectCollection
from hurricane.services import storage as keys
from hurricane.services.storage import Storage
from hurricane.state.app_state import THEMES, AppState
from hurricane.state.session_state import SessionState

logger = logging.getLogger(__name__)

WEAK_AVERAGE = 6.5
DEFAULT_FOCUS_SCORE = 7.0


class SessionError(Exception):
    pass


class SubjectNotFoundError(SessionError):
    pass


class StudySession:
    """Owns the application state and writes it through to storage after every mutation."""

    def __init__(self, store: Storage, state: Optional[AppState] = None) -> None:
        self.store = store
        self.state = state or AppState()

    @classmethod
    def open(cls, store: Storage) -> "StudySession":
        state = AppState(
            session=SessionState.from_dict(store.load(keys.USER_KEY)),
            subjects=SubjectCollection.from_list(store.load(keys.SUBJECTS_KEY, [])),
            schedule=WeeklySchedule.from_dict(store.load(keys.SCHEDULE_KEY, {})),
            prediction=PredictionTarget(
                goal=_goal_or_default(store.load(keys.TARGET_GOAL_KEY)),
                strong_subjects=list(store.load(keys.STRONG_SUBJECTS_KEY, []) or []),
            ),
            redeemed_cycles=int(store.load(keys.REDEEMED_KEY, 0) or 0),
            theme=_theme_or_default(store.load(keys.THEME_KEY)),
        )
        return cls(store, state)

    @classmethod
    def from_settings(cls) -> "StudySession":
        return cls.open(Storage.from_settings())

    # profile

    def login(self, name: str, class_name: str) -> SessionState:
        name = (name or "").strip()
        class_name = (class_name or "").strip()
        if not name or not class_name:
            raise SessionError("Name and class are required.")
        self.state.session = SessionState(name=name, class_name=class_name)
        self.store.save(keys.USER_KEY, self.state.session.to_dict())
        return self.state.session

    def logout(self) -> None:
        self.store.remove(keys.ALL_KEYS)
        self.state = AppState()
        logger.info("Session data wiped on logout")

    # subjects

    def select_subjects(self, names: Optional[Iterable[str]] = None) -> SubjectCollection:
        chosen = list(dict.fromkeys(DEFAULT_SELECTION if names is None else names))
        if not chosen:
            raise SessionError("Select at least one subject.")
        self.state.subjects = SubjectCollection.from_names(chosen)
        self._save_subjects()
        self._prune_strong_subjects()
        return self.state.subjects

    def reset_subjects(self) -> None:
        self.state.subjects = SubjectCollection()
        self.store.remove([keys.SUBJECTS_KEY])

    def subject(self, subject_id: str) -> Subject:
        subject = self.state.subjects.get(subject_id)
        if subject is None:
            raise SubjectNotFoundError(f"Unknown subject: {subject_id}")
        return subject

    def set_score(self, subject_id: str, period: Period | Semester, slot: str, raw: str | float | None) -> Subject:
        semester = _editable_semester(period)
        value = parse_score(raw)

        def edit(subject: Subject) -> Subject:
            try:
                return subject.with_score(semester, slot, value)
            except KeyError as exc:
                raise SessionError(f"Unknown score slot: {slot}") from exc

        updated = self._edit_subject(subject_id, edit)
        logger.debug("%s %s.%s <- %r", updated.name, semester.value, slot, raw)
        return updated

    def toggle_assessment(self, subject_id: str, period: Period | Semester, slot: str, value: int) -> Subject:
        if value not in (0, 1):
            raise SessionError("Assessment value must be 0 or 1.")
        semester = _editable_semester(period)

        def edit(subject: Subject) -> Subject:
            try:
                current = subject.entry(semester).get(slot)
            except KeyError as exc:
                raise SessionError(f"Unknown score slot: {slot}") from exc
            return subject.with_score(semester, slot, None if current == value else float(value))

        return self._edit_subject(subject_id, edit)

    def stats(self, period: Period) -> PeriodStats:
        return period_stats(self.state.subjects, period)

    # prediction

    def set_goal(self, goal: Goal | str) -> None:
        try:
            self.state.prediction.goal = Goal(goal)
        except ValueError as exc:
            raise SessionError(f"Unknown goal: {goal}") from exc
        self.store.save(keys.TARGET_GOAL_KEY, self.state.prediction.goal.value)

    def toggle_strong_subject(self, name: str) -> bool:
        subject = self.state.subjects.by_name(name)
        # A flagged name can always be unflagged, even after its subject was deselected.
        if not self.state.prediction.is_strong(name) and (subject is None or not subject.is_graded):
            raise SessionError(f"{name} is not a graded subject.")
        changed = self.state.prediction.toggle_strong(name)
        self.store.save(keys.STRONG_SUBJECTS_KEY, list(self.state.prediction.strong_subjects))
        return changed

    def predictions(self) -> List[Prediction]:
        return predict_subjects(self.state.subjects.graded(), self.state.prediction)

    @property
    def prediction_target(self) -> PredictionTarget:
        return self.state.prediction

    # rewards

    def reward_bars(self) -> int:
        return current_bars(lifetime_bars(self.state.subjects), self.state.redeemed_cycles)

    def claim_reward(self) -> RewardClaim:
        claim = claim_reward(lifetime_bars(self.state.subjects), self.state.redeemed_cycles)
        if claim.claimed:
            self.state.redeemed_cycles = claim.redeemed_cycles
            self.store.save(keys.REDEEMED_KEY, claim.redeemed_cycles)
        return claim

    # schedule

    def set_schedule(self, day: str, session: str, text: str) -> ScheduleEntry:
        try:
            entry = self.state.schedule.set_session(day, session, text)
        except KeyError as exc:
            raise SessionError(f"Unknown schedule session: {session}") from exc
        self.store.save(keys.SCHEDULE_KEY, self.state.schedule.to_dict())
        return entry

    # practice

    def focus_subject(self, period: Period) -> Optional[tuple[str, float]]:
        """Subject to build exercise suggestions for, with the score to quote."""
        graded = self.state.subjects.graded()
        semester = Period.HK1 if Period(period) is Period.HK1 else Period.HK2
        scored = [(s, s.average_for(semester)) for s in graded if s.average_for(semester) is not None]
        weak = sorted([pair for pair in scored if pair[1] < WEAK_AVERAGE], key=lambda pair: pair[1])
        if weak:
            return weak[0][0].name, weak[0][1]
        if not graded:
            return None
        fallback = graded[0]
        value = fallback.average_for(semester)
        return fallback.name, value if value is not None else DEFAULT_FOCUS_SCORE

    def set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise SessionError(f"Unknown theme: {theme}")
        self.state.theme = theme
        self.store.save(keys.THEME_KEY, theme)

    def _save_subjects(self) -> None:
        self.store.save(keys.SUBJECTS_KEY, self.state.subjects.to_list())

    def _edit_subject(self, subject_id: str, edit: Callable[[Subject], Subject]) -> Subject:
        """Apply ``edit`` to the stored copy of one subject so concurrent edits to others survive."""

        def apply(rows):
            subjects = SubjectCollection.from_list(rows or [])
            subject = subjects.get(subject_id)
            if subject is None:
                raise SubjectNotFoundError(f"Unknown subject: {subject_id}")
            subjects.replace(edit(subject))
            return subjects.to_list()

        rows = self.store.update(keys.SUBJECTS_KEY, apply, [])
        self.state.subjects = SubjectCollection.from_list(rows)
        return self.state.subjects.get(subject_id)

    def _prune_strong_subjects(self) -> None:
        graded = {s.name for s in self.state.subjects.graded()}
        target = self.state.prediction
        kept = [name for name in target.strong_subjects if name in graded]
        if kept != target.strong_subjects:
            target.strong_subjects = kept
            self.store.save(keys.STRONG_SUBJECTS_KEY, kept)


def _editable_semester(period: Period | Semester) -> Semester:
    if period == Period.YEARLY.value:
        raise SessionError("Yearly results are read-only.")
    try:
        return Semester(period)
    except ValueError as exc:
        raise SessionError(f"Unknown semester: {period}") from exc


def _goal_or_default(value: Optional[str]) -> Goal:
    try:
        return Goal(value) if value else Goal.GOOD
    except ValueError:
        return Goal.GOOD


def _theme_or_default(value: Optional[str]) -> str:
    return value if value in THEMES else "default"
