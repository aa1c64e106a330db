import base64
import binascii
from dataclasses import asdict
from datetime import date
from typing import Dict, List, Literal, Optional, Union

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from hurricane.config.logging_setup import configure_logging
from hurricane.config.settings import settings
from hurricane.core.quiz import ExerciseSuggestion, Quiz
from hurricane.core.schedule import date_key, week_dates
from hurricane.core.scores import Period
from hurricane.services.ai_service import AIServiceError, GeminiService
from hurricane.state.study_session import SessionError, StudySession, SubjectNotFoundError

configure_logging()

app = FastAPI(title="Hurricane Study API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ProfilePayload(BaseModel):
    name: str
    class_name: str


class SubjectSelectionPayload(BaseModel):
    names: Optional[List[str]] = None


class ScorePayload(BaseModel):
    value: Union[float, str, None] = None


class TogglePayload(BaseModel):
    value: Literal[0, 1]


class GoalPayload(BaseModel):
    goal: Literal["excellent", "good"]


class StrongSubjectPayload(BaseModel):
    name: str


class SchedulePayload(BaseModel):
    session: Literal["morning", "afternoon", "evening"]
    text: str = ""


class SearchPayload(BaseModel):
    query: str = ""
    period: Period = Period.HK1


class QuizTopicPayload(BaseModel):
    topic: str = Field(min_length=1)


class QuizFilePayload(BaseModel):
    data_base64: str
    mime_type: str


class ThemePayload(BaseModel):
    theme: str


def _open_session() -> StudySession:
    return StudySession.from_settings()


def _ai() -> GeminiService:
    return GeminiService.from_settings()


def _class_name(session: StudySession) -> str:
    if not session.state.session.is_authenticated:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Log in first")
    return session.state.session.class_name or ""


def _bad_request(exc: SessionError) -> HTTPException:
    code = status.HTTP_404_NOT_FOUND if isinstance(exc, SubjectNotFoundError) else status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=str(exc))


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/profile")
def get_profile() -> Dict:
    session = _open_session()
    return {
        "profile": session.state.session.to_dict(),
        "is_authenticated": session.state.session.is_authenticated,
        "has_subjects": session.state.has_subjects,
        "theme": session.state.theme,
    }


@app.post("/profile")
def login(payload: ProfilePayload) -> Dict[str, str]:
    session = _open_session()
    try:
        return session.login(payload.name, payload.class_name).to_dict()
    except SessionError as exc:
        raise _bad_request(exc) from exc


@app.delete("/profile")
def logout() -> Dict[str, str]:
    _open_session().logout()
    return {"status": "cleared"}


@app.get("/subjects")
def list_subjects(period: Period = Period.HK1) -> List[Dict]:
    session = _open_session()
    rows = []
    for subject in session.state.subjects:
        row = subject.to_dict()
        row["comment"] = subject.comment_for(period)
        rows.append(row)
    return rows


@app.post("/subjects")
def select_subjects(payload: SubjectSelectionPayload) -> List[Dict]:
    session = _open_session()
    try:
        return [s.to_dict() for s in session.select_subjects(payload.names)]
    except SessionError as exc:
        raise _bad_request(exc) from exc


@app.delete("/subjects")
def reset_subjects() -> Dict[str, str]:
    _open_session().reset_subjects()
    return {"status": "reset"}


@app.put("/subjects/{subject_id}/{semester}/{slot}")
def set_score(subject_id: str, semester: str, slot: str, payload: ScorePayload) -> Dict:
    session = _open_session()
    try:
        return session.set_score(subject_id, semester, slot, payload.value).to_dict()
    except SessionError as exc:
        raise _bad_request(exc) from exc


@app.post("/subjects/{subject_id}/{semester}/{slot}/toggle")
def toggle_assessment(subject_id: str, semester: str, slot: str, payload: TogglePayload) -> Dict:
    session = _open_session()
    try:
        return session.toggle_assessment(subject_id, semester, slot, payload.value).to_dict()
    except SessionError as exc:
        raise _bad_request(exc) from exc


@app.get("/stats/{period}")
def get_stats(period: Period) -> Dict:
    stats = _open_session().stats(period)
    return {
        "period": period.value,
        "gpa": stats.gpa,
        "rank": stats.rank.value,
        "chart": [{"name": name, "value": value} for name, value in stats.chart],
    }


@app.get("/prediction")
def get_predictions() -> Dict:
    session = _open_session()
    target = session.prediction_target
    return {
        "goal": target.goal.value,
        "strong_subjects": list(target.strong_subjects),
        "subjects": [
            {
                "name": p.subject_name,
                "target": f"{p.target:.1f}",
                "status": p.status.value,
                "strong": target.is_strong(p.subject_name),
                "hk1": asdict(p.hk1) if p.hk1 else None,
                "hk2": asdict(p.hk2) if p.hk2 else None,
                "comment": p.comment,
            }
            for p in session.predictions()
        ],
    }


@app.put("/prediction/goal")
def set_goal(payload: GoalPayload) -> Dict[str, str]:
    session = _open_session()
    session.set_goal(payload.goal)
    return {"goal": payload.goal}


@app.post("/prediction/strong")
def toggle_strong(payload: StrongSubjectPayload) -> Dict:
    session = _open_session()
    try:
        changed = session.toggle_strong_subject(payload.name)
    except SessionError as exc:
        raise _bad_request(exc) from exc
    return {"changed": changed, "strong_subjects": list(session.prediction_target.strong_subjects)}


@app.get("/rewards")
def get_rewards() -> Dict[str, int]:
    session = _open_session()
    return {"bars": session.reward_bars(), "redeemed_cycles": session.state.redeemed_cycles}


@app.post("/rewards/claim")
def claim_reward() -> Dict:
    session = _open_session()
    claim = session.claim_reward()
    if not claim.claimed:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Not enough bars to claim")
    return {"redeemed_cycles": claim.redeemed_cycles, "quote": claim.quote}


@app.get("/schedule")
def get_schedule(anchor: Optional[date] = None) -> List[Dict]:
    session = _open_session()
    return [
        {"date": date_key(day), **asdict(session.state.schedule.entry(day))}
        for day in week_dates(anchor or date.today())
    ]


@app.put("/schedule/{day}")
def set_schedule(day: date, payload: SchedulePayload) -> Dict:
    session = _open_session()
    entry = session.set_schedule(date_key(day), payload.session, payload.text)
    return {"date": date_key(day), **asdict(entry)}


@app.post("/exercises/search")
def search_exercises(payload: SearchPayload) -> List[ExerciseSuggestion]:
    session = _open_session()
    class_name = _class_name(session)
    ai = _ai()
    if payload.query.strip():
        return ai.search(payload.query.strip(), class_name)
    focus = session.focus_subject(payload.period)
    if focus is None:
        return []
    name, score = focus
    return ai.suggest(name, score, class_name)


@app.post("/quiz")
def generate_quiz(payload: QuizTopicPayload) -> Quiz:
    class_name = _class_name(_open_session())
    try:
        return _ai().generate_quiz(payload.topic, class_name)
    except AIServiceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


@app.post("/quiz/file")
def generate_quiz_from_file(payload: QuizFilePayload) -> Quiz:
    class_name = _class_name(_open_session())
    try:
        data = base64.b64decode(payload.data_base64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid base64 document") from exc
    try:
        return _ai().generate_quiz_from_file(data, payload.mime_type, class_name)
    except AIServiceError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


@app.put("/theme")
def set_theme(payload: ThemePayload) -> Dict[str, str]:
    session = _open_session()
    try:
        session.set_theme(payload.theme)
    except SessionError as exc:
        raise _bad_request(exc) from exc
    return {"theme": session.state.theme}
