from __future__ import annotations

import logging

import flet as ft

from hurricane.state.study_session import StudySession
from hurricane.ui.views.grades_view import build_grades_view
from hurricane.ui.views.login_view import build_login_view
from hurricane.ui.views.practice_view import build_practice_view
from hurricane.ui.views.prediction_view import build_prediction_view
from hurricane.ui.views.schedule_view import build_schedule_view
from hurricane.ui.views.subjects_view import build_subjects_view

logger = logging.getLogger(__name__)


class HurricaneApp:
    def __init__(self, page: ft.Page, session: StudySession) -> None:
        self.page = page
        self.page.title = "Hurricane AI"
        self.session = session
        self.page.on_route_change = self.handle_route_change
        self.page.on_view_pop = self.handle_view_pop

    def run(self) -> None:
        self.page.go(self.start_route())

    def start_route(self) -> str:
        if not self.session.state.session.is_authenticated:
            return "/login"
        if not self.session.state.has_subjects:
            return "/subjects"
        return "/dashboard"

    def go(self, route: str) -> None:
        self.page.go(route)

    def logout(self) -> None:
        self.session.logout()
        self.go("/login")

    def build_view(self, route: str) -> ft.View:
        back = lambda: self.go("/dashboard")  # noqa: E731
        if route == "/login":
            return build_login_view(self.page, self.session, lambda: self.go(self.start_route()))
        if route == "/subjects":
            return build_subjects_view(self.page, self.session, lambda: self.go("/dashboard"))
        if route == "/prediction":
            return build_prediction_view(self.page, self.session, back)
        if route == "/practice":
            return build_practice_view(self.page, self.session, back)
        if route == "/schedule":
            return build_schedule_view(self.page, self.session, back)
        return build_grades_view(self.page, self.session, self.go, self.logout)

    def handle_route_change(self, e: ft.RouteChangeEvent) -> None:
        route = e.route
        expected = self.start_route()
        if expected in ("/login", "/subjects") and route != expected:
            route = expected
        logger.debug("Route %s", route)
        self.page.views.clear()
        self.page.views.append(self.build_view(route))
        self.page.update()

    def handle_view_pop(self, _: ft.ViewPopEvent) -> None:
        self.go("/dashboard")


def main(page: ft.Page) -> None:
    HurricaneApp(page, StudySession.from_settings()).run()
