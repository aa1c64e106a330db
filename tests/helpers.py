from hurricane.core.scores import ScoreEntry, SubjectType
from hurricane.core.subjects import Subject


def flat_entry(value: float) -> ScoreEntry:
    """Entry whose semester average is exactly ``value``."""
    return ScoreEntry(tx1=value, tx2=value, tx3=value, gk=value, ck=value)


def graded(name: str, value: float | None) -> Subject:
    entry = flat_entry(value) if value is not None else ScoreEntry()
    return Subject(id=name, name=name, type=SubjectType.GRADED, hk1=entry, hk2=entry)


def pass_fail(name: str, passed: bool | None) -> Subject:
    if passed is None:
        entry = ScoreEntry()
    else:
        entry = ScoreEntry(tx1=1, tx2=1, tx3=1, gk=1, ck=1 if passed else 0)
    return Subject(id=name, name=name, type=SubjectType.PASS_FAIL, hk1=entry, hk2=entry)
