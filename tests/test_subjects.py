import unittest

from hurricane.core.catalog import DEFAULT_SELECTION, grade_band, graded_comment, subject_type_for
from hurricane.core.scores import Period, ScoreEntry, Semester, Status, SubjectType
from hurricane.core.subjects import Subject, SubjectCollection


class SubjectTests(unittest.TestCase):
    def test_new_subject_has_no_results(self):
        subject = Subject.create("Toán")
        self.assertIs(subject.type, SubjectType.GRADED)
        self.assertIsNone(subject.avg1)
        self.assertIsNone(subject.avg2)
        self.assertIsNone(subject.overall_avg)

    def test_with_score_rederives_results(self):
        subject = Subject.create("Toán")
        for slot, value in (("tx1", 8), ("tx2", 9), ("tx3", 7), ("gk", 8), ("ck", 9)):
            subject = subject.with_score(Semester.HK1, slot, value)
        self.assertEqual(subject.avg1, 8.4)
        self.assertIsNone(subject.overall_avg)

        cleared = subject.with_score(Semester.HK1, "ck", None)
        self.assertIsNone(cleared.avg1)
        self.assertEqual(subject.avg1, 8.4)

    def test_yearly_average_after_both_semesters(self):
        entry1 = ScoreEntry(tx1=7, tx2=7, tx3=7, gk=7, ck=7)
        entry2 = ScoreEntry(tx1=8, tx2=8, tx3=8, gk=8, ck=8)
        subject = Subject(id="a", name="Toán", type=SubjectType.GRADED, hk1=entry1, hk2=entry2)
        self.assertEqual(subject.overall_avg, 7.7)
        self.assertEqual(subject.average_for(Period.YEARLY), 7.7)

    def test_pass_fail_subject_statuses(self):
        subject = Subject.create("Thể dục")
        self.assertIs(subject.type, SubjectType.PASS_FAIL)
        for slot in ("tx1", "tx2", "tx3", "gk", "ck"):
            subject = subject.with_score(Semester.HK2, slot, 1)
        self.assertIsNone(subject.status1)
        self.assertIs(subject.status2, Status.PASS)
        self.assertIs(subject.status_for(Period.YEARLY), Status.PASS)
        self.assertIsNone(subject.avg2)

    def test_stored_results_are_ignored_on_load(self):
        data = {
            "id": "x",
            "name": "Toán",
            "type": "graded",
            "hk1": {"tx1": 8, "tx2": 9, "tx3": 7, "gk": 8, "ck": 9},
            "hk2": {},
            "avg1": 2.0,
        }
        subject = Subject.from_dict(data)
        self.assertEqual(subject.avg1, 8.4)
        self.assertEqual(Subject.from_dict(subject.to_dict()), subject)

    def test_comments(self):
        subject = Subject.create("Toán")
        self.assertEqual(subject.comment_for(Period.HK1), "Chưa đủ 3 TX + GK + CK")
        self.assertEqual(graded_comment(9.0), "Xuất sắc! Tiếp tục phát huy thế mạnh.")
        self.assertEqual(Subject.create("Âm nhạc").comment_for(Period.HK1), "Chưa đánh giá")

    def test_grade_bands(self):
        self.assertEqual(grade_band(None), "none")
        self.assertEqual(grade_band(3.4), "weak")
        self.assertEqual(grade_band(3.5), "below")
        self.assertEqual(grade_band(6.4), "average")
        self.assertEqual(grade_band(6.5), "good")
        self.assertEqual(grade_band(8.0), "excellent")


class SubjectCollectionTests(unittest.TestCase):
    def test_display_order_follows_priority(self):
        collection = SubjectCollection.from_names(["Âm nhạc", "Môn lạ", "Ngữ văn", "Toán"])
        self.assertEqual([s.name for s in collection], ["Toán", "Ngữ văn", "Âm nhạc", "Môn lạ"])

    def test_ids_are_unique(self):
        collection = SubjectCollection.from_names(DEFAULT_SELECTION)
        self.assertEqual(len({s.id for s in collection}), len(DEFAULT_SELECTION))

    def test_default_selection(self):
        self.assertEqual(len(DEFAULT_SELECTION), 13)
        self.assertIs(subject_type_for("GDĐP"), SubjectType.PASS_FAIL)
        self.assertIs(subject_type_for("Tin học"), SubjectType.GRADED)

    def test_replace_unknown_subject(self):
        collection = SubjectCollection()
        with self.assertRaises(KeyError):
            collection.replace(Subject.create("Toán"))


if __name__ == "__main__":
    unittest.main()
