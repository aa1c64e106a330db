from __future__ import annotations

from typing import Dict, List, Tuple

from hurricane.core.scores import Status, SubjectType

GRADED_SUBJECTS: List[str] = [
    "Toán",
    "Ngữ văn",
    "Tiếng Anh",
    "Vật lí",
    "Hóa học",
    "Sinh học",
    "Lịch sử",
    "Địa lí",
    "GDCD",
    "Tin học",
    "GDQP",
    "GDKTPL",
]

PASS_FAIL_SUBJECTS: List[str] = [
    "Mĩ thuật",
    "Âm nhạc",
    "Thể dục",
    "HĐTNHN",
    "GDĐP",
]

SUBJECT_PRIORITY: Dict[str, int] = {
    **{name: idx + 1 for idx, name in enumerate(GRADED_SUBJECTS)},
    **{name: idx + 100 for idx, name in enumerate(PASS_FAIL_SUBJECTS)},
}
UNKNOWN_PRIORITY = 999

DEFAULT_SELECTION: List[str] = GRADED_SUBJECTS[:8] + PASS_FAIL_SUBJECTS

# (upper bound exclusive, band, comment); the last band has no upper bound.
GRADE_BANDS: List[Tuple[float, str, str]] = [
    (3.5, "weak", "Kết quả yếu. Cần cải thiện nhiều và luyện tập thêm."),
    (5.0, "below", "Kết quả chưa đạt. Cần nỗ lực hơn nữa."),
    (6.5, "average", "Kết quả trung bình. Cần cố gắng hơn."),
    (8.0, "good", "Học tốt, nên duy trì phong độ."),
    (float("inf"), "excellent", "Xuất sắc! Tiếp tục phát huy thế mạnh."),
]

MISSING_GRADED_COMMENT = "Chưa đủ 3 TX + GK + CK"
PASS_FAIL_COMMENTS: Dict[Status | None, str] = {
    Status.PASS: "Đạt yêu cầu",
    Status.FAIL: "Cần cố gắng",
    None: "Chưa đánh giá",
}


def subject_type_for(name: str) -> SubjectType:
    return SubjectType.GRADED if name in GRADED_SUBJECTS else SubjectType.PASS_FAIL


def priority_of(name: str) -> int:
    return SUBJECT_PRIORITY.get(name, UNKNOWN_PRIORITY)


def _band(average: float) -> Tuple[str, str]:
    for upper, band, comment in GRADE_BANDS:
        if average < upper:
            return band, comment
    return GRADE_BANDS[-1][1], GRADE_BANDS[-1][2]


def grade_band(average: float | None) -> str:
    if average is None:
        return "none"
    return _band(average)[0]


def graded_comment(average: float | None) -> str:
    if average is None:
        return MISSING_GRADED_COMMENT
    return _band(average)[1]


def pass_fail_comment(status: Status | None) -> str:
    return PASS_FAIL_COMMENTS[status]
