import random
from collections import Counter

import pytest

from quiz.errors import InsufficientContent
from quiz.fallback_bank import FALLBACK_BANK, all_fallback_questions
from quiz.history import QuestionHistory
from quiz.models import Difficulty, QuestionSet
from quiz.normalize import question_key
from quiz.storage import keys
from quiz.storage.dual_tier import DualTierStore, KeyValueTier
from quiz.supplier import QuestionSupplier
from quiz.validator import ContentValidator
from tests.conftest import COMMUNITY, PARTICIPANT, StubGateway, make_question


def small_bank(easy=3, medium=4, hard=4):
    return {
        Difficulty.EASY: [make_question(f"Naruto easy question {i}?", Difficulty.EASY, "Fallback") for i in range(easy)],
        Difficulty.MEDIUM: [make_question(f"Naruto medium question {i}?", Difficulty.MEDIUM, "Fallback") for i in range(medium)],
        Difficulty.HARD: [make_question(f"Naruto hard question {i}?", Difficulty.HARD, "Fallback") for i in range(hard)],
    }


@pytest.fixture
def make_supplier(volatile, db, clock, settings):
    def factory(candidates=None, bank=None):
        question_sets = DualTierStore(
            "question-sets", keys.question_set_key, QuestionSet.to_dict, QuestionSet.from_dict,
            volatile, KeyValueTier(db, keys.question_set_key, QuestionSet.to_dict, QuestionSet.from_dict,
                                   clock.timestamp),
            default_ttl=settings.question_set_ttl,
        )
        return QuestionSupplier(
            StubGateway(candidates),
            ContentValidator(),
            QuestionHistory(volatile, db, clock, settings),
            question_sets,
            settings,
            clock,
            fallback_bank=bank,
            rng=random.Random(42),
        )
    return factory


def test_fallback_bank_is_well_formed():
    questions = all_fallback_questions()
    assert len(questions) >= 13
    assert len({question_key(q.question) for q in questions}) == len(questions)
    for question in questions:
        assert question.answer in question.options
        assert 2 <= len(question.options) <= 4
        assert len(question.question) <= 250
        assert all(len(option) <= 100 for option in question.options)
    assert all(len(FALLBACK_BANK[d]) >= 4 for d in Difficulty)


class TestAssemble:
    def test_difficulty_order_and_reserve(self, make_supplier):
        question_set = make_supplier().assemble([], set())

        assert [q.difficulty for q in question_set.active] == (
            [Difficulty.EASY] * 2 + [Difficulty.MEDIUM] * 4 + [Difficulty.HARD] * 4
        )
        assert len(question_set.reserve) == 3

        all_keys = [question_key(q.question) for q in question_set.active + question_set.reserve]
        assert len(all_keys) == len(set(all_keys))

    def test_avoided_questions_are_excluded(self, make_supplier):
        bank = small_bank()
        avoid = {question_key(bank[Difficulty.EASY][0].question)}

        question_set = make_supplier(bank=bank).assemble([], avoid)

        texts = {q.question for q in question_set.active + question_set.reserve}
        assert bank[Difficulty.EASY][0].question not in texts
        assert len(question_set.active) == 10
        assert question_set.reserve == []

    def test_insufficient_content(self, make_supplier):
        bank = small_bank()
        avoid = {question_key(bank[Difficulty.EASY][0].question), question_key(bank[Difficulty.HARD][0].question)}

        with pytest.raises(InsufficientContent) as exc_info:
            make_supplier(bank=bank).assemble([], avoid)
        assert exc_info.value.available == 9

    def test_duplicates_between_providers_and_bank_collapse(self, make_supplier):
        bank = small_bank()
        duplicate = make_question("NARUTO EASY QUESTION 0?  ", Difficulty.EASY, "OpenTDB")

        question_set = make_supplier(bank=bank).assemble([duplicate], set())

        all_questions = question_set.active + question_set.reserve
        keys_ = Counter(question_key(q.question) for q in all_questions)
        assert keys_["naruto easy question 0?"] == 1
        assert len(all_questions) == 11

    def test_short_bucket_is_filled_from_other_difficulties(self, make_supplier):
        question_set = make_supplier(bank=small_bank(easy=0, medium=6, hard=6)).assemble([], set())

        counts = Counter(q.difficulty for q in question_set.active)
        assert len(question_set.active) == 10
        assert counts[Difficulty.EASY] == 0
        assert [q.difficulty for q in question_set.active[:8]] == [Difficulty.MEDIUM] * 4 + [Difficulty.HARD] * 4
        assert len(question_set.reserve) == 2


class TestPrepare:
    async def test_provider_questions_are_validated(self, make_supplier):
        good = make_question("In One Piece, what is Zoro's fighting style?", Difficulty.HARD)
        off_topic = make_question("Which Marvel hero carries a shield?", Difficulty.HARD)
        supplier = make_supplier(candidates=[good, off_topic], bank=small_bank(hard=3))

        question_set = await supplier.prepare(PARTICIPANT, COMMUNITY)

        texts = {q.question for q in question_set.active + question_set.reserve}
        assert good.question in texts
        assert off_topic.question not in texts

    async def test_fallback_bank_covers_failed_providers(self, make_supplier):
        supplier = make_supplier(candidates=[])

        question_set = await supplier.prepare(PARTICIPANT, COMMUNITY)

        assert len(question_set.active) == 10
        assert len(question_set.reserve) == 3
        assert {q.source for q in question_set.active + question_set.reserve} == {"Fallback"}

    async def test_history_feeds_the_avoid_set(self, make_supplier):
        bank = small_bank(easy=4)
        supplier = make_supplier(bank=bank)
        asked = bank[Difficulty.EASY][0]
        await supplier.history.record(PARTICIPANT, COMMUNITY, asked)

        avoid = await supplier.history.avoid_set(PARTICIPANT, COMMUNITY)
        question_set = await supplier.prepare(PARTICIPANT, COMMUNITY)

        assert question_key(asked.question) in avoid
        assert asked.question not in {q.question for q in question_set.active + question_set.reserve}

    async def test_history_is_per_participant(self, make_supplier):
        supplier = make_supplier()
        await supplier.history.record(PARTICIPANT, COMMUNITY, FALLBACK_BANK[Difficulty.EASY][0])
        assert await supplier.history.avoid_set("someone-else", COMMUNITY) == set()

    async def test_get_or_prepare_uses_cache(self, make_supplier):
        supplier = make_supplier()

        first = await supplier.get_or_prepare(PARTICIPANT, COMMUNITY)
        second = await supplier.get_or_prepare(PARTICIPANT, COMMUNITY)

        assert supplier.gateway.calls == 1
        assert first == second

    async def test_prefetch_is_joined(self, make_supplier):
        supplier = make_supplier()

        task = supplier.prefetch(PARTICIPANT, COMMUNITY)
        joined = await supplier.get_or_prepare(PARTICIPANT, COMMUNITY)

        assert joined == await task
        assert supplier.gateway.calls == 1

    async def test_discard_forces_new_preparation(self, make_supplier):
        supplier = make_supplier()
        await supplier.get_or_prepare(PARTICIPANT, COMMUNITY)
        await supplier.discard(PARTICIPANT, COMMUNITY)
        await supplier.get_or_prepare(PARTICIPANT, COMMUNITY)
        assert supplier.gateway.calls == 2

    async def test_prepare_batch_reports_failures(self, make_supplier):
        supplier = make_supplier(bank=small_bank())
        participants = [("a", COMMUNITY), ("b", COMMUNITY)]

        results = await supplier.prepare_batch(participants)
        assert all(isinstance(r, QuestionSet) for r in results.values())

        empty = make_supplier(bank={d: [] for d in Difficulty})
        results = await empty.prepare_batch(participants)
        assert all(isinstance(r, InsufficientContent) for r in results.values())

    async def test_close_cancels_inflight_preparations(self, make_supplier):
        supplier = make_supplier()

        task = supplier.prefetch(PARTICIPANT, COMMUNITY)
        await supplier.close()

        assert task.cancelled()
        assert supplier._inflight == {}
        assert await supplier.question_sets.read((PARTICIPANT, COMMUNITY)) is None
