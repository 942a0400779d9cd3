"""
Unit tests for question/answer extraction
"""
from app.services.qa_extractor import (
    Extracted, NoQuestionsExtracted, QuestionAnswer, extract, render
)


def pairs_of(outcome):
    assert isinstance(outcome, Extracted)
    return [(p.question, p.answer) for p in outcome.pairs]


class TestExtraction:
    def test_two_pairs_in_order(self):
        """Pairs come back trimmed and in source order"""
        raw = "Q1: What is X?\nA: X is Y.\nQ2: Why?\nA: Because.\n"
        outcome = extract(raw)
        assert outcome.to_list() == [
            {"question": "What is X?", "answer": "X is Y."},
            {"question": "Why?", "answer": "Because."},
        ]

    def test_no_markers_is_not_an_empty_success(self):
        outcome = extract("Here are some thoughts about the summary, but no questions.")
        assert isinstance(outcome, NoQuestionsExtracted)
        assert outcome.raw_text.startswith("Here are some thoughts")

    def test_empty_text(self):
        assert isinstance(extract(""), NoQuestionsExtracted)

    def test_single_pair_without_trailing_newline(self):
        assert pairs_of(extract("Q1: Only one?\nA: Yes")) == [("Only one?", "Yes")]

    def test_three_pairs(self):
        raw = "Q1: a?\nA: 1\nQ2: b?\nA: 2\nQ3: c?\nA: 3\n"
        assert pairs_of(extract(raw)) == [("a?", "1"), ("b?", "2"), ("c?", "3")]

    def test_more_than_three_pairs_are_all_kept(self):
        raw = "".join(f"Q{n}: question {n}\nA: answer {n}\n" for n in range(1, 6))
        assert len(extract(raw).pairs) == 5

    def test_ordinals_are_ignored(self):
        raw = "Q7: first\nA: one\nQ7: second\nA: two\nQ2: third\nA: three"
        assert pairs_of(extract(raw)) == [("first", "one"), ("second", "two"), ("third", "three")]

    def test_surrounding_prose_is_ignored(self):
        raw = (
            "Sure! Here are three practice questions:\n\n"
            "Q1: What is an atom?\nA: The smallest unit of matter.\n\n"
            "Good luck with your studies!"
        )
        assert pairs_of(extract(raw)) == [("What is an atom?", "The smallest unit of matter.")]

    def test_pairs_separated_by_blank_lines(self):
        raw = "Q1: a?\nA: 1\n\n\nQ2: b?\nA: 2\n"
        assert pairs_of(extract(raw)) == [("a?", "1"), ("b?", "2")]

    def test_question_without_answer_is_dropped(self):
        raw = "Q1: Orphan question?\nQ2: Real question?\nA: Real answer.\n"
        assert pairs_of(extract(raw)) == [("Real question?", "Real answer.")]

    def test_malformed_answer_marker_is_dropped(self):
        raw = "Q1: Bad?\nAnswer: not recognised\nQ2: Good?\nA: recognised\n"
        assert pairs_of(extract(raw)) == [("Good?", "recognised")]

    def test_bodies_must_share_the_marker_line(self):
        assert isinstance(extract("Q1:\nWhat is X?\nA: Y\n"), NoQuestionsExtracted)
        assert isinstance(extract("Q1: What is X?\nA:\nY\n"), NoQuestionsExtracted)
        raw = "Q1:\nDetached?\nQ2: Attached?\nA: Yes.\n"
        assert pairs_of(extract(raw)) == [("Attached?", "Yes.")]

    def test_answer_is_cut_at_first_line_break(self):
        raw = "Q1: Multi?\nA: first line\nsecond line\nQ2: Next?\nA: Sure.\n"
        assert pairs_of(extract(raw)) == [("Multi?", "first line"), ("Next?", "Sure.")]

    def test_whitespace_is_trimmed_independently(self):
        assert pairs_of(extract("Q1:    padded?   \nA:   spaced out   \n")) == [("padded?", "spaced out")]

    def test_crlf_line_endings(self):
        assert pairs_of(extract("Q1: Windows?\r\nA: Yes.\r\n")) == [("Windows?", "Yes.")]

    def test_unicode_bodies(self):
        raw = "Q1: Was bedeutet „Grüße“?\nA: Greetings, 你好 👋\n"
        assert pairs_of(extract(raw)) == [("Was bedeutet „Grüße“?", "Greetings, 你好 👋")]


class TestRender:
    def test_render_round_trip_is_stable(self):
        """Extracting a canonical rendering gives back the same pairs"""
        first = extract("intro\nQ4: What?\nA: That.\nQ9: Who?\nA: Them.\noutro")
        again = extract(render(first.pairs))
        assert again == first

    def test_render_numbers_sequentially(self):
        text = render([QuestionAnswer("a?", "1"), QuestionAnswer("b?", "2")])
        assert text == "Q1: a?\nA: 1\nQ2: b?\nA: 2\n"

    def test_render_nothing(self):
        assert render([]) == ""
