import random

import pytest

from quiz.models import Difficulty, Question
from quiz.normalize import (
    clean_text,
    is_avoided,
    normalize_difficulty,
    normalize_question,
    pad_options,
    question_hash,
    question_key,
)
from quiz.validator import ContentValidator
from tests.conftest import make_question


@pytest.fixture
def validator():
    return ContentValidator()


class TestNormalize:
    def test_clean_text_decodes_entities(self):
        assert clean_text("&quot;Naruto&quot; &amp; friends&#039; ") == "\"Naruto\" & friends'"
        assert clean_text(None) == ""

    @pytest.mark.parametrize("raw,expected", [
        ("easy", Difficulty.EASY),
        ("Beginner", Difficulty.EASY),
        ("HARD", Difficulty.HARD),
        ("expert", Difficulty.HARD),
        ("difficult", Difficulty.HARD),
        ("medium", Difficulty.MEDIUM),
        ("unknown", Difficulty.MEDIUM),
        (None, Difficulty.MEDIUM),
    ])
    def test_difficulty_spellings(self, raw, expected):
        assert normalize_difficulty(raw) == expected

    def test_normalize_question_always_contains_answer(self):
        question = normalize_question(
            "Who is the &quot;Copy Ninja&quot;?", "Kakashi", ["Guy", "Guy", "Asuma"], "Hard", "OpenTDB",
            rng=random.Random(1),
        )
        assert question.question == 'Who is the "Copy Ninja"?'
        assert question.answer in question.options
        assert sorted(question.options) == ["Asuma", "Guy", "Kakashi"]
        assert question.difficulty == Difficulty.HARD

    def test_normalize_question_caps_options_and_keeps_answer(self):
        question = normalize_question(
            "Which anime features the Straw Hat crew?", "One Piece",
            ["Naruto", "Bleach", "Fairy Tail", "Black Clover", "Haikyuu", "One Piece"], "easy", "AniQuizAPI",
            rng=random.Random(3),
        )
        assert len(question.options) == 4
        assert "One Piece" in question.options
        assert set(question.options) - {"One Piece"} == {"Naruto", "Bleach", "Fairy Tail"}

    def test_hash_ignores_case_and_punctuation(self):
        assert question_hash("What is Naruto's dream?") == question_hash("  what is narutos dream ")
        assert question_hash("What is Naruto's dream?") != question_hash("What is Goku's dream?")

    def test_is_avoided_by_key_or_hash(self):
        question = make_question("Who trained Naruto?")
        assert is_avoided(question, {question_key("WHO TRAINED NARUTO?")})
        assert is_avoided(question, {question_hash("who trained naruto")})
        assert not is_avoided(question, {"something else"})
        assert not is_avoided(question, set())

    def test_pad_options(self):
        assert pad_options(["Goku"], ["Goku", "Vegeta", "Gohan", "Piccolo"]) == ["Goku", "Vegeta", "Gohan", "Piccolo"]
        assert pad_options(["a"], []) == ["a", "Option 1", "Option 2", "Option 3"]


class TestContentValidator:
    def test_accepts_anime_question(self, validator):
        assert validator.accept(make_question("In Naruto, who leads the Hidden Leaf Village?"))

    def test_accepts_pattern_question(self, validator):
        assert validator.accept(make_question("Which of these is the main character of the show?"))

    def test_rejects_missing_fields(self, validator):
        question = Question("", "Naruto", ("Naruto", "Goku"), Difficulty.EASY, "OpenTDB")
        assert validator.reject_reason(question) == "missing fields"

    def test_rejects_too_few_options(self, validator):
        question = Question("Which anime is this?", "Naruto", ("Naruto",), Difficulty.EASY, "OpenTDB")
        assert validator.reject_reason(question) == "too few options"

    def test_rejects_too_many_options(self, validator):
        question = Question(
            "Which anime features the Straw Hat crew?", "One Piece",
            ("Naruto", "One Piece", "Bleach", "Fairy Tail", "Black Clover"), Difficulty.EASY, "OpenTDB",
        )
        assert validator.reject_reason(question) == "too many options"

    def test_rejects_answer_not_in_options(self, validator):
        question = Question("Which anime is this?", "Bleach", ("Naruto", "Goku"), Difficulty.EASY, "OpenTDB")
        assert validator.reject_reason(question) == "answer not in options"

    def test_rejects_long_question_and_option(self, validator):
        long_text = "In which anime " + "x" * 250 + "?"
        assert validator.reject_reason(make_question(long_text)) == "question too long"

        question = Question("Which anime?", "Naruto", ("Naruto", "y" * 101), Difficulty.EASY, "OpenTDB")
        assert validator.reject_reason(question) == "option too long"

    def test_rejects_recently_asked(self, validator):
        question = make_question("In One Piece, what is Luffy's dream?")
        assert not validator.accept(question, {question_key(question.question)})
        assert not validator.accept(question, {question_hash(question.question)})

    def test_rejects_off_domain_even_with_anime_terms(self, validator):
        question = make_question("Which Marvel hero appeared in an anime crossover?")
        assert validator.reject_reason(question) == "off-domain"

    def test_rejects_production_trivia(self, validator):
        question = make_question("Which animation studio produced Naruto?")
        assert validator.reject_reason(question) == "production trivia"

    def test_rejects_question_without_domain_signal(self, validator):
        question = Question("What is the capital of France?", "Paris", ("Paris", "Rome", "Berlin", "Madrid"),
                            Difficulty.EASY, "OpenTDB")
        assert validator.reject_reason(question) == "no anime signal"

    def test_terms_match_whole_words_only(self, validator):
        # "stand" and "chan" must not fire inside "understand" and "change"
        question = Question("Do you understand how to change a tire?", "Yes", ("Yes", "No"),
                            Difficulty.EASY, "OpenTDB")
        assert not validator.accept(question)

    def test_weak_signal_needs_trusted_source(self, validator):
        options = ("Monkey D. Luffy", "Roronoa Zoro", "Nami", "Sanji")
        trusted = Question("Who wears a straw hat?", "Monkey D. Luffy", options, Difficulty.EASY, "OpenTDB")
        untrusted = Question("Who wears a straw hat?", "Monkey D. Luffy", options, Difficulty.EASY, "Scraper")

        assert validator.accept(trusted)
        assert not validator.accept(untrusted)

    def test_rejects_inline_option_markers(self, validator):
        question = make_question("Which anime is oldest? A) Naruto B) Bleach C) One Piece")
        assert validator.reject_reason(question) == "inline option markers"

    def test_single_initial_is_not_an_option_marker(self, validator):
        question = make_question("In One Piece, who is Monkey D. Luffy's brother?", answer="Portgas D. Ace")
        assert validator.accept(question)

    def test_rejects_numeral_heavy_question(self, validator):
        question = make_question("In Naruto, which of 1, 2, 3, 4 or 5 tails is strongest?")
        assert validator.reject_reason(question) == "too many numerals"
