import unittest

from hurricane.core.averages import semester_average, semester_status, yearly_average, yearly_status
from hurricane.core.scores import ScoreEntry, Status, parse_score, round1


class SemesterAverageTests(unittest.TestCase):
    def test_three_tx_with_exams(self):
        entry = ScoreEntry(tx1=8, tx2=9, tx3=7, gk=8, ck=9)
        self.assertEqual(semester_average(entry), 8.4)

    def test_all_five_tx_are_counted(self):
        entry = ScoreEntry(tx1=10, tx2=10, tx3=10, tx4=10, tx5=10, gk=5, ck=5)
        self.assertAlmostEqual(semester_average(entry), 7.5, places=2)

    def test_tx_slots_need_not_be_contiguous(self):
        entry = ScoreEntry(tx1=8, tx3=9, tx5=7, gk=8, ck=9)
        self.assertEqual(semester_average(entry), 8.4)

    def test_rounds_half_up(self):
        # 50 / 8 = 6.25
        entry = ScoreEntry(tx1=5, tx2=5, tx3=5, gk=7, ck=7)
        self.assertEqual(semester_average(entry), 6.3)

    def test_undefined_without_enough_data(self):
        self.assertIsNone(semester_average(ScoreEntry(tx1=8, tx2=9, gk=8, ck=9)))
        self.assertIsNone(semester_average(ScoreEntry(tx1=8, tx2=9, tx3=7, ck=9)))
        self.assertIsNone(semester_average(ScoreEntry(tx1=8, tx2=9, tx3=7, gk=8)))
        self.assertIsNone(semester_average(ScoreEntry()))

    def test_zero_is_a_real_score(self):
        entry = ScoreEntry(tx1=0, tx2=0, tx3=0, gk=0, ck=0)
        self.assertEqual(semester_average(entry), 0.0)


class PassFailStatusTests(unittest.TestCase):
    def test_all_competent_passes(self):
        self.assertIs(semester_status(ScoreEntry(tx1=1, tx2=1, tx3=1, gk=1, ck=1)), Status.PASS)

    def test_single_zero_fails(self):
        self.assertIs(semester_status(ScoreEntry(tx1=1, tx2=1, tx3=0, gk=1, ck=1)), Status.FAIL)

    def test_undefined_until_all_five_filled(self):
        self.assertIsNone(semester_status(ScoreEntry(tx1=1, tx2=1, tx3=1, gk=1)))

    def test_tx4_and_tx5_are_ignored(self):
        entry = ScoreEntry(tx1=1, tx2=1, tx3=1, tx4=0, tx5=0, gk=1, ck=1)
        self.assertIs(semester_status(entry), Status.PASS)


class YearlyTests(unittest.TestCase):
    def test_second_semester_counts_double(self):
        self.assertEqual(yearly_average(7.0, 8.0), 7.7)

    def test_undefined_without_both_semesters(self):
        self.assertIsNone(yearly_average(7.0, None))
        self.assertIsNone(yearly_average(None, 8.0))

    def test_yearly_status_follows_second_semester(self):
        self.assertIs(yearly_status(Status.FAIL, Status.PASS), Status.PASS)
        self.assertIsNone(yearly_status(Status.PASS, None))


class ScoreInputTests(unittest.TestCase):
    def test_round1(self):
        self.assertEqual(round1(8.375), 8.4)
        self.assertEqual(round1(8.5), 8.5)
        self.assertEqual(round1(4.75), 4.8)

    def test_parse_score_clamps(self):
        self.assertEqual(parse_score("12"), 10.0)
        self.assertEqual(parse_score(-3), 0.0)
        self.assertEqual(parse_score("7,5"), 7.5)

    def test_parse_score_blank_and_garbage(self):
        self.assertIsNone(parse_score(""))
        self.assertIsNone(parse_score("  "))
        self.assertIsNone(parse_score("abc"))
        self.assertIsNone(parse_score(None))


if __name__ == "__main__":
    unittest.main()
