from typing import Callable
import flet as ft

from hurricane.core.catalog import grade_band
from hurricane.core.rewards import BARS_PER_CYCLE
from hurricane.core.scores import PASS_FAIL_SLOTS, SCORE_SLOTS, Period, Status
from hurricane.core.subjects import Subject
from hurricane.state.study_session import SessionError, StudySession

BAND_COLORS = {
    "none": ft.Colors.GREY_400,
    "weak": ft.Colors.RED_700,
    "below": ft.Colors.RED_400,
    "average": ft.Colors.AMBER_700,
    "good": ft.Colors.BLUE_400,
    "excellent": ft.Colors.GREEN_600,
}

PERIOD_LABELS = {
    Period.HK1: "Học kì I",
    Period.HK2: "Học kì II",
    Period.YEARLY: "Cả năm",
}


def _build_bar(value: float) -> ft.Container:
    width = max(10, int(220 * (value / 10)))
    color = ft.Colors.GREEN_400 if value >= 8 else ft.Colors.BLUE_400
    return ft.Container(width=width, height=12, bgcolor=color, border_radius=6)


def _result_label(subject: Subject, period: Period) -> ft.Text:
    if subject.is_graded:
        value = subject.average_for(period)
        return ft.Text(
            f"{value:.1f}" if value is not None else "--",
            color=BAND_COLORS[grade_band(value)],
            weight=ft.FontWeight.BOLD,
        )
    status = subject.status_for(period)
    if status is Status.PASS:
        return ft.Text("ĐẠT", color=ft.Colors.GREEN_600, weight=ft.FontWeight.BOLD)
    if status is Status.FAIL:
        return ft.Text("C.ĐẠT", color=ft.Colors.RED_600, weight=ft.FontWeight.BOLD)
    return ft.Text("--", color=ft.Colors.GREY_400)


def build_grades_view(
    page: ft.Page,
    session: StudySession,
    on_navigate: Callable[[str], None],
    on_logout: Callable[[], None],
) -> ft.View:
    state = session.state
    period_dd = ft.Dropdown(
        label="Kì",
        width=200,
        value=state.active_period.value,
        options=[ft.dropdown.Option(p.value, PERIOD_LABELS[p]) for p in Period],
    )
    status = ft.Text(color=ft.Colors.RED_400)
    table = ft.Column(spacing=8)
    stats_column = ft.Column(spacing=6)
    reward_text = ft.Text()
    reward_banner = ft.Text(color=ft.Colors.GREEN_600, size=16)

    def set_status(message: str) -> None:
        status.value = message
        page.update()

    def on_score_blur(subject_id: str, slot: str):
        def handler(e):
            try:
                session.set_score(subject_id, state.active_period, slot, e.control.value)
            except SessionError as exc:
                set_status(str(exc))
                return
            refresh()

        return handler

    def on_toggle(subject_id: str, slot: str, value: int):
        def handler(_):
            try:
                session.toggle_assessment(subject_id, state.active_period, slot, value)
            except SessionError as exc:
                set_status(str(exc))
                return
            refresh()

        return handler

    def graded_inputs(subject: Subject, period: Period) -> list:
        if period is Period.YEARLY:
            return [ft.Text(f"HK1: {subject.avg1 if subject.avg1 is not None else '--'}  "
                            f"HK2: {subject.avg2 if subject.avg2 is not None else '--'}")]
        entry = subject.entry(period.value)
        return [
            ft.TextField(
                label=slot.upper(),
                width=70,
                value="" if entry.get(slot) is None else f"{entry.get(slot):g}",
                on_blur=on_score_blur(subject.id, slot),
            )
            for slot in SCORE_SLOTS
        ]

    def pass_fail_inputs(subject: Subject, period: Period) -> list:
        if period is Period.YEARLY:
            return []
        entry = subject.entry(period.value)
        controls = []
        for slot in PASS_FAIL_SLOTS:
            value = entry.get(slot)
            controls.append(
                ft.Column(
                    spacing=2,
                    controls=[
                        ft.Text(slot.upper(), size=11),
                        ft.Row(
                            spacing=2,
                            controls=[
                                ft.OutlinedButton(
                                    "Đ" if value != 1 else "Đ ✓",
                                    on_click=on_toggle(subject.id, slot, 1),
                                ),
                                ft.OutlinedButton(
                                    "CĐ" if value != 0 else "CĐ ✓",
                                    on_click=on_toggle(subject.id, slot, 0),
                                ),
                            ],
                        ),
                    ],
                )
            )
        return controls

    def refresh_table(period: Period) -> None:
        table.controls.clear()
        for subject in state.subjects:
            inputs = graded_inputs(subject, period) if subject.is_graded else pass_fail_inputs(subject, period)
            table.controls.append(
                ft.Card(
                    content=ft.Container(
                        padding=12,
                        content=ft.Column(
                            controls=[
                                ft.Row(
                                    alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
                                    controls=[
                                        ft.Text(subject.name, weight=ft.FontWeight.BOLD),
                                        _result_label(subject, period),
                                    ],
                                ),
                                ft.Row(controls=inputs, wrap=True),
                                ft.Text(subject.comment_for(period), italic=True, size=11),
                            ]
                        ),
                    )
                )
            )

    def refresh_stats(period: Period) -> None:
        stats = session.stats(period)
        stats_column.controls.clear()
        stats_column.controls.append(ft.Text(f"Điểm trung bình: {stats.gpa:.1f}", size=18))
        stats_column.controls.append(
            ft.Text(f"Xếp loại: {stats.rank.value}", size=18, weight=ft.FontWeight.BOLD)
        )
        for name, value in stats.chart:
            stats_column.controls.append(
                ft.Row(controls=[ft.Text(name, width=120), _build_bar(value), ft.Text(f"{value:.1f}")])
            )

    def refresh_rewards() -> None:
        reward_text.value = f"Thanh năng lượng: {session.reward_bars()}/{BARS_PER_CYCLE}"

    def refresh() -> None:
        period = state.active_period
        status.value = ""
        refresh_table(period)
        refresh_stats(period)
        refresh_rewards()
        page.update()

    def on_period_change(_):
        state.active_period = Period(period_dd.value)
        refresh()

    def on_claim(_):
        claim = session.claim_reward()
        reward_banner.value = claim.quote if claim.claimed else "Chưa đủ 10 vạch để nhận thưởng."
        refresh()

    def on_reset_subjects(_):
        session.reset_subjects()
        on_navigate("/subjects")

    period_dd.on_change = on_period_change

    refresh_table(state.active_period)
    refresh_stats(state.active_period)
    refresh_rewards()

    return ft.View(
        route="/dashboard",
        controls=[
            ft.AppBar(
                title=ft.Text(f"Hurricane AI - {state.session.name} ({state.session.class_name})"),
                actions=[
                    ft.TextButton("Dự đoán", on_click=lambda _: on_navigate("/prediction")),
                    ft.TextButton("Luyện tập", on_click=lambda _: on_navigate("/practice")),
                    ft.TextButton("Lịch học", on_click=lambda _: on_navigate("/schedule")),
                    ft.TextButton("Đăng xuất", on_click=lambda _: on_logout()),
                ],
            ),
            ft.Container(
                padding=20,
                content=ft.Column(
                    scroll=ft.ScrollMode.AUTO,
                    controls=[
                        ft.Row(
                            controls=[
                                period_dd,
                                ft.OutlinedButton("Chọn lại môn", on_click=on_reset_subjects),
                            ]
                        ),
                        status,
                        table,
                        ft.Divider(),
                        ft.Text("Thống kê", size=20, weight=ft.FontWeight.BOLD),
                        stats_column,
                        ft.Divider(),
                        ft.Row(controls=[reward_text, ft.Button("Nhận thưởng", on_click=on_claim)]),
                        reward_banner,
                    ],
                ),
            ),
        ],
    )
