from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Iterable

MIN_SCORE = 0.0
MAX_SCORE = 10.0

TX_SLOTS: tuple[str, ...] = ("tx1", "tx2", "tx3", "tx4", "tx5")
SCORE_SLOTS: tuple[str, ...] = TX_SLOTS + ("gk", "ck")
# tx4/tx5 are not assessed for pass-fail subjects.
PASS_FAIL_SLOTS: tuple[str, ...] = ("tx1", "tx2", "tx3", "gk", "ck")


class SubjectType(str, Enum):
    GRADED = "graded"
    PASS_FAIL = "pass-fail"


class Status(str, Enum):
    PASS = "Pass"
    FAIL = "Fail"


class Semester(str, Enum):
    HK1 = "hk1"
    HK2 = "hk2"


class Period(str, Enum):
    HK1 = "hk1"
    HK2 = "hk2"
    YEARLY = "yearly"


def round1(value: float) -> float:
    """Round half-up to one decimal place (8.375 -> 8.4, 8.25 -> 8.3)."""
    return math.floor(value * 10 + 0.5) / 10


def clamp_score(value: float) -> float:
    return max(MIN_SCORE, min(MAX_SCORE, value))


def parse_score(raw: str | float | int | None) -> float | None:
    """Turn user input into a stored score.

    Blank input clears the slot. Numbers outside [0, 10] are clamped, and text
    that is not a number is treated the same as blank.
    """
    if raw is None:
        return None
    if isinstance(raw, str):
        text = raw.strip().replace(",", ".")
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    else:
        value = float(raw)
    if math.isnan(value):
        return None
    return clamp_score(value)


@dataclass(frozen=True)
class ScoreEntry:
    tx1: float | None = None
    tx2: float | None = None
    tx3: float | None = None
    tx4: float | None = None
    tx5: float | None = None
    gk: float | None = None
    ck: float | None = None

    @property
    def filled_tx(self) -> list[float]:
        return [v for v in (self.tx1, self.tx2, self.tx3, self.tx4, self.tx5) if v is not None]

    def get(self, slot: str) -> float | None:
        if slot not in SCORE_SLOTS:
            raise KeyError(slot)
        return getattr(self, slot)

    def with_value(self, slot: str, value: float | None) -> "ScoreEntry":
        if slot not in SCORE_SLOTS:
            raise KeyError(slot)
        return replace(self, **{slot: value})

    def slots(self, names: Iterable[str] = SCORE_SLOTS) -> list[float | None]:
        return [getattr(self, name) for name in names]

    def to_dict(self) -> dict[str, float | None]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict | None) -> "ScoreEntry":
        data = data or {}
        return cls(**{slot: parse_score(data.get(slot)) for slot in SCORE_SLOTS})
