import os
import tempfile
import unittest

from hurricane.core.prediction import Goal
from hurricane.core.rank import Rank
from hurricane.core.scores import Period, Semester, Status
from hurricane.services import storage as keys
from hurricane.services.storage import Storage
from hurricane.state.study_session import SessionError, StudySession, SubjectNotFoundError


def fill(session, subject_id, semester, values):
    for slot, value in zip(("tx1", "tx2", "tx3", "gk", "ck"), values):
        session.set_score(subject_id, semester, slot, value)


class StudySessionTests(unittest.TestCase):
    def setUp(self):
        self.store = Storage(":memory:")
        self.session = StudySession.open(self.store)
        self.session.login("  Lan ", "10A1")
        self.session.select_subjects()
        self.math = self.session.state.subjects.by_name("Toán")
        self.music = self.session.state.subjects.by_name("Âm nhạc")

    def tearDown(self):
        self.store.close()

    def test_login_requires_name_and_class(self):
        with self.assertRaises(SessionError):
            self.session.login("Lan", " ")
        self.assertEqual(self.store.load(keys.USER_KEY), {"name": "Lan", "className": "10A1"})

    def test_default_selection(self):
        subjects = self.session.state.subjects
        self.assertEqual(len(subjects), 13)
        self.assertEqual(len(subjects.graded()), 8)
        self.assertEqual(len(subjects.pass_fail()), 5)

    def test_score_edit_recomputes_and_persists(self):
        fill(self.session, self.math.id, Semester.HK1, ["8", "9", "7", "8", "9"])
        self.assertEqual(self.session.subject(self.math.id).avg1, 8.4)

        reopened = StudySession.open(self.store)
        self.assertEqual(reopened.subject(self.math.id).avg1, 8.4)
        self.assertEqual(reopened.state.session.name, "Lan")

    def test_out_of_range_is_clamped(self):
        subject = self.session.set_score(self.math.id, "hk1", "tx1", "15")
        self.assertEqual(subject.hk1.tx1, 10.0)
        subject = self.session.set_score(self.math.id, "hk1", "tx1", "abc")
        self.assertIsNone(subject.hk1.tx1)

    def test_yearly_is_read_only(self):
        with self.assertRaises(SessionError):
            self.session.set_score(self.math.id, Period.YEARLY, "tx1", 5)

    def test_unknown_subject_and_slot(self):
        with self.assertRaises(SubjectNotFoundError):
            self.session.set_score("missing", "hk1", "tx1", 5)
        with self.assertRaises(SessionError):
            self.session.set_score(self.math.id, "hk1", "tx9", 5)

    def test_toggle_assessment(self):
        for slot in ("tx1", "tx2", "tx3", "gk", "ck"):
            self.session.toggle_assessment(self.music.id, Period.HK2, slot, 1)
        self.assertIs(self.session.subject(self.music.id).status2, Status.PASS)

        subject = self.session.toggle_assessment(self.music.id, Period.HK2, "ck", 1)
        self.assertIsNone(subject.hk2.ck)
        self.assertIsNone(subject.status2)

        subject = self.session.toggle_assessment(self.music.id, Period.HK2, "ck", 0)
        self.assertIs(subject.status2, Status.FAIL)

    def test_rank_through_session(self):
        for subject in self.session.state.subjects.graded():
            fill(self.session, subject.id, Semester.HK1, [9, 9, 9, 9, 9])
        self.assertIs(self.session.stats(Period.HK1).rank, Rank.INSUFFICIENT)
        for subject in self.session.state.subjects.pass_fail():
            fill(self.session, subject.id, Semester.HK1, [1, 1, 1, 1, 1])
        stats = self.session.stats(Period.HK1)
        self.assertIs(stats.rank, Rank.EXCELLENT)
        self.assertEqual(stats.gpa, 9.0)

    def test_strong_subjects(self):
        with self.assertRaises(SessionError):
            self.session.toggle_strong_subject("Âm nhạc")
        for subject in self.session.state.subjects.graded()[:6]:
            self.assertTrue(self.session.toggle_strong_subject(subject.name))
        seventh = self.session.state.subjects.graded()[6]
        self.assertFalse(self.session.toggle_strong_subject(seventh.name))
        self.assertEqual(len(self.store.load(keys.STRONG_SUBJECTS_KEY)), 6)

    def test_deselected_strong_subjects_are_dropped(self):
        flagged = ["Toán", "Ngữ văn", "Tiếng Anh", "Vật lí", "Lịch sử", "Địa lí"]
        for name in flagged:
            self.assertTrue(self.session.toggle_strong_subject(name))

        self.session.reset_subjects()
        self.session.select_subjects(["Toán", "Ngữ văn", "Tiếng Anh", "Vật lí", "Hóa học", "Sinh học", "Âm nhạc"])
        self.assertEqual(self.session.prediction_target.strong_subjects, ["Toán", "Ngữ văn", "Tiếng Anh", "Vật lí"])
        self.assertTrue(self.session.toggle_strong_subject("Hóa học"))

        reopened = StudySession.open(self.store)
        self.assertEqual(
            reopened.prediction_target.strong_subjects,
            ["Toán", "Ngữ văn", "Tiếng Anh", "Vật lí", "Hóa học"],
        )

    def test_leftover_strong_subject_can_be_unflagged(self):
        self.session.state.prediction.strong_subjects.append("GDKTPL")
        self.assertTrue(self.session.toggle_strong_subject("GDKTPL"))
        self.assertFalse(self.session.prediction_target.is_strong("GDKTPL"))
        with self.assertRaises(SessionError):
            self.session.toggle_strong_subject("GDKTPL")

    def test_goal_and_predictions(self):
        self.session.set_goal("excellent")
        self.session.toggle_strong_subject("Toán")
        predictions = {p.subject_name: p for p in self.session.predictions()}
        self.assertEqual(len(predictions), 8)
        self.assertEqual(predictions["Toán"].target, 9.0)
        self.assertEqual(predictions["Ngữ văn"].target, 6.5)
        self.assertIs(StudySession.open(self.store).prediction_target.goal, Goal.EXCELLENT)
        with self.assertRaises(SessionError):
            self.session.set_goal("legendary")

    def test_reward_claim(self):
        fill(self.session, self.math.id, Semester.HK1, [10, 10, 10, 10, 10])
        self.assertEqual(self.session.reward_bars(), 8)
        self.assertFalse(self.session.claim_reward().claimed)

        self.session.set_score(self.math.id, Semester.HK2, "ck", 10)
        claim = self.session.claim_reward()
        self.assertTrue(claim.claimed)
        self.assertEqual(self.session.reward_bars(), 1)
        self.assertEqual(self.store.load(keys.REDEEMED_KEY), 1)

    def test_schedule(self):
        self.session.set_schedule("2026-10-12", "morning", "Toán")
        with self.assertRaises(SessionError):
            self.session.set_schedule("2026-10-12", "night", "x")
        self.assertEqual(self.store.load(keys.SCHEDULE_KEY)["2026-10-12"]["morning"], "Toán")

    def test_focus_subject(self):
        self.assertEqual(self.session.focus_subject(Period.HK1), ("Toán", 7.0))
        physics = self.session.state.subjects.by_name("Vật lí")
        english = self.session.state.subjects.by_name("Tiếng Anh")
        fill(self.session, physics.id, Semester.HK1, [5, 5, 5, 5, 5])
        fill(self.session, english.id, Semester.HK1, [4, 4, 4, 4, 4])
        self.assertEqual(self.session.focus_subject(Period.HK1), ("Tiếng Anh", 4.0))
        self.assertEqual(self.session.focus_subject(Period.YEARLY), ("Toán", 7.0))

    def test_reset_subjects(self):
        self.session.reset_subjects()
        self.assertFalse(self.session.state.has_subjects)
        self.assertIsNone(self.store.load(keys.SUBJECTS_KEY))

    def test_logout_wipes_everything(self):
        self.session.set_theme("tet")
        self.session.logout()
        for key in keys.ALL_KEYS:
            self.assertIsNone(self.store.load(key))
        self.assertFalse(self.session.state.session.is_authenticated)


class SharedDatabaseTests(unittest.TestCase):
    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.path = os.path.join(tmp.name, "hurricane.db")
        first = Storage(self.path)
        self.addCleanup(first.close)
        self.first = StudySession.open(first)
        self.first.login("Lan", "10A1")
        self.first.select_subjects()

    def open_session(self):
        store = Storage(self.path)
        self.addCleanup(store.close)
        return StudySession.open(store)

    def test_edits_from_two_sessions_both_survive(self):
        second = self.open_session()
        math = self.first.state.subjects.by_name("Toán")
        literature = second.state.subjects.by_name("Ngữ văn")

        self.first.set_score(math.id, Semester.HK1, "tx1", 9)
        second.set_score(literature.id, Semester.HK1, "tx1", 7)

        fresh = self.open_session()
        self.assertEqual(fresh.subject(math.id).hk1.tx1, 9.0)
        self.assertEqual(fresh.subject(literature.id).hk1.tx1, 7.0)
        self.assertEqual(second.subject(math.id).hk1.tx1, 9.0)

    def test_toggle_reads_the_stored_value(self):
        second = self.open_session()
        music = self.first.state.subjects.by_name("Âm nhạc")

        self.first.toggle_assessment(music.id, Semester.HK1, "tx1", 1)
        second.toggle_assessment(music.id, Semester.HK1, "tx1", 1)

        self.assertIsNone(self.open_session().subject(music.id).hk1.tx1)


if __name__ == "__main__":
    unittest.main()
