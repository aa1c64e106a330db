import unittest

from pydantic import ValidationError

from hurricane.core.quiz import Quiz, QuizRun, export_file_name, export_quiz_text

QUIZ_DATA = {
    "topic": "Hàm số bậc hai",
    "questions": [
        {"id": 1, "question": "1 + 1 = ?", "options": ["1", "2", "3", "4"], "correctAnswer": 1, "explanation": "Cộng."},
        {"id": 2, "question": "2 x 3 = ?", "options": ["5", "6", "7", "8"], "correctAnswer": 1, "explanation": "Nhân."},
    ],
}


class QuizRunTests(unittest.TestCase):
    def setUp(self):
        self.quiz = Quiz.model_validate(QUIZ_DATA)

    def test_parses_camel_case_answer(self):
        self.assertEqual(self.quiz.questions[0].correct_answer, 1)

    def test_answer_index_must_point_at_an_option(self):
        question = dict(QUIZ_DATA["questions"][0], correctAnswer=5)
        with self.assertRaises(ValidationError):
            Quiz.model_validate({"topic": "Hàm số", "questions": [question]})

    def test_questions_need_four_options(self):
        question = dict(QUIZ_DATA["questions"][0], options=["1", "2"], correctAnswer=0)
        with self.assertRaises(ValidationError):
            Quiz.model_validate({"topic": "Hàm số", "questions": [question]})

    def test_scoring_flow(self):
        run = QuizRun(self.quiz)
        self.assertIsNone(run.answer())

        run.select(1)
        self.assertTrue(run.answer())
        self.assertTrue(run.showing_result)
        self.assertIsNone(run.answer())
        run.next_step()

        run.select(0)
        self.assertFalse(run.answer())
        run.next_step()

        self.assertTrue(run.finished)
        self.assertEqual(run.score, 1)

    def test_export_text(self):
        text = export_quiz_text(self.quiz, "An", "10A1")
        self.assertIn("ĐỀ LUYỆN TẬP: Hàm số bậc hai", text)
        self.assertIn("Học sinh: An - Lớp: 10A1", text)
        self.assertIn("   B. 2", text)
        self.assertIn("Câu 2: B", text)
        self.assertIn("Giải thích: Nhân.", text)

    def test_export_file_name(self):
        self.assertEqual(export_file_name(self.quiz), "HurricaneAI_Quiz_Hàm_số_bậc_hai.txt")


if __name__ == "__main__":
    unittest.main()
