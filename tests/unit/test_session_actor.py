"""
Unit Tests for the Session Actor

Tests record lifecycle, scoring, history truncation and persistence.
"""

import asyncio

import pytest

from core import NotFound, NotInitialized, SessionActor, StorageFailure
from tests.fakes import FlakyStore
from models import DifficultyLevel, Role, MAX_SCORE, MIN_SCORE

POSITIVE = "great, awesome"                   # +15 after clamping
NEGATIVE = "confused, I don't understand"    # -12 after clamping


class TestSessionLifecycle:
    """Test suite for init and missing-record behavior."""

    @pytest.mark.asyncio
    async def test_new_session_defaults(self, make_actor, clock):
        state = await make_actor().init()

        assert state.session_id == "session_test_abc123"
        assert state.history == []
        assert state.metrics.understanding_score == 0
        assert state.metrics.difficulty_level == DifficultyLevel.BEGINNER
        assert state.metrics.total_messages == 0
        assert state.metrics.topics_discussed == []
        assert state.created_at == clock.now

    @pytest.mark.asyncio
    async def test_init_is_idempotent(self, make_actor, store):
        actor = make_actor()
        await actor.init()
        await actor.add_message("makes sense", "Great!")
        saves = store.saves

        state = await actor.init()

        assert len(state.history) == 2
        assert state.metrics.understanding_score == 10
        assert store.saves == saves

    @pytest.mark.asyncio
    async def test_history_defaults_without_record(self, make_actor, store):
        history, level = await make_actor().get_history()

        assert history == []
        assert level == DifficultyLevel.BEGINNER
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_progress_without_record_is_not_found(self, make_actor):
        with pytest.raises(NotFound):
            await make_actor().get_progress()

    @pytest.mark.asyncio
    async def test_mutations_without_record_fail(self, make_actor):
        actor = make_actor()

        with pytest.raises(NotInitialized):
            await actor.add_message("hi", "hello")

        with pytest.raises(NotInitialized):
            await actor.set_difficulty(DifficultyLevel.ADVANCED)


class TestAddMessage:
    """Test suite for recording exchanges."""

    @pytest.mark.asyncio
    async def test_appends_user_then_assistant_turn(self, make_actor, clock):
        actor = make_actor()
        await actor.init()
        clock.advance(5_000)

        metrics = await actor.add_message("What is recursion?", "A function calling itself.")
        history, _ = await actor.get_history()

        assert [turn.role for turn in history] == [Role.USER, Role.ASSISTANT]
        assert history[0].content == "What is recursion?"
        assert history[1].timestamp == history[0].timestamp + 1
        assert metrics.total_messages == 2
        assert metrics.last_interaction == clock.now

    @pytest.mark.asyncio
    async def test_scoring_scenario_stays_beginner(self, make_actor):
        actor = make_actor()
        await actor.init()

        metrics = await actor.add_message("I understand, that makes sense, thanks", "Glad to hear it!")

        assert metrics.understanding_score == 15
        assert metrics.difficulty_level == DifficultyLevel.BEGINNER

    @pytest.mark.asyncio
    async def test_tiers_climb_and_fall_one_step_at_a_time(self, make_actor):
        actor = make_actor()
        await actor.init()

        climb = []
        for _ in range(5):
            metrics = await actor.add_message(POSITIVE, "Nice work.")
            climb.append((metrics.understanding_score, metrics.difficulty_level.value))

        assert climb == [
            (15, "beginner"),
            (30, "beginner"),
            (45, "intermediate"),
            (60, "intermediate"),
            (75, "advanced"),
        ]

        fall = []
        for _ in range(5):
            metrics = await actor.add_message(NEGATIVE, "Let me explain differently.")
            fall.append((metrics.understanding_score, metrics.difficulty_level.value))

        assert fall == [
            (63, "advanced"),
            (51, "intermediate"),
            (39, "intermediate"),
            (27, "intermediate"),
            (15, "beginner"),
        ]

    @pytest.mark.asyncio
    async def test_score_stays_in_bounds(self, make_actor):
        actor = make_actor()
        await actor.init()

        for _ in range(3):
            metrics = await actor.add_message(NEGATIVE, "ok")
            assert metrics.understanding_score == MIN_SCORE

        for _ in range(10):
            metrics = await actor.add_message(POSITIVE, "ok")
            assert MIN_SCORE <= metrics.understanding_score <= MAX_SCORE

        assert metrics.understanding_score == MAX_SCORE

    @pytest.mark.asyncio
    async def test_history_truncates_but_counter_does_not(self, make_actor, clock):
        actor = make_actor()
        await actor.init()

        for i in range(26):
            clock.advance(1_000)
            await actor.add_message(f"question {i}", f"answer {i}")

        history, _ = await actor.get_history()
        progress = await actor.get_progress()

        assert len(history) == 50
        assert progress.metrics.total_messages == 52
        assert progress.message_count == 50
        # The oldest exchange was evicted as a whole pair
        assert history[0].role == Role.USER
        assert history[0].content == "question 1"
        assert history[-1].content == "answer 25"

    @pytest.mark.asyncio
    async def test_concurrent_exchanges_are_serialized(self, make_actor):
        actor = make_actor()
        await actor.init()

        await asyncio.gather(*[
            actor.add_message(f"question {i}", f"answer {i}") for i in range(10)
        ])

        history, _ = await actor.get_history()
        progress = await actor.get_progress()

        assert progress.metrics.total_messages == 20
        assert len(history) == 20
        for user_turn, assistant_turn in zip(history[::2], history[1::2]):
            assert user_turn.role == Role.USER
            assert assistant_turn.role == Role.ASSISTANT
            assert user_turn.content.replace("question", "answer") == assistant_turn.content


class TestProgressAndDifficulty:
    """Test suite for progress snapshots and manual overrides."""

    @pytest.mark.asyncio
    async def test_progress_reports_age_and_count(self, make_actor, clock):
        actor = make_actor()
        await actor.init()
        await actor.add_message("thanks", "You're welcome")
        clock.advance(90_000)

        progress = await actor.get_progress()

        assert progress.session_age == 90_000
        assert progress.message_count == 2
        assert progress.metrics.understanding_score == 3

    @pytest.mark.asyncio
    async def test_manual_override_skips_thresholds(self, make_actor):
        actor = make_actor()
        await actor.init()

        level = await actor.set_difficulty(DifficultyLevel.ADVANCED)
        _, current = await actor.get_history()

        assert level == DifficultyLevel.ADVANCED
        assert current == DifficultyLevel.ADVANCED

    @pytest.mark.asyncio
    async def test_override_then_score_applies_hysteresis_from_new_tier(self, make_actor):
        actor = make_actor()
        await actor.init()
        await actor.set_difficulty(DifficultyLevel.ADVANCED)

        # Score 3 is far below 55 but advanced only drops one tier
        metrics = await actor.add_message("thanks", "Sure")

        assert metrics.difficulty_level == DifficultyLevel.INTERMEDIATE


class TestPersistence:
    """Test suite for durable state."""

    @pytest.mark.asyncio
    async def test_fresh_actor_reloads_stored_record(self, make_actor):
        actor = make_actor()
        await actor.init()
        await actor.add_message("got it", "Great")
        await actor.set_difficulty(DifficultyLevel.INTERMEDIATE)

        reloaded = make_actor()
        history, level = await reloaded.get_history()
        progress = await reloaded.get_progress()

        assert [turn.content for turn in history] == ["got it", "Great"]
        assert level == DifficultyLevel.INTERMEDIATE
        assert progress.metrics.understanding_score == 10

    @pytest.mark.asyncio
    async def test_stored_record_matches_actor_state(self, make_actor, store):
        actor = make_actor()
        await actor.init()
        await actor.add_message("i see", "Good")

        stored = await store.load(actor.session_id)
        history, level = await actor.get_history()

        assert stored.history == history
        assert stored.metrics.difficulty_level == level
        assert stored.metrics.understanding_score == 10

    @pytest.mark.asyncio
    async def test_failed_save_leaves_state_untouched(self, make_actor, store):
        actor = make_actor()
        await actor.init()
        await actor.add_message("makes sense", "Good")

        store.fail_saves = True
        with pytest.raises(StorageFailure):
            await actor.add_message("great", "Thanks")
        store.fail_saves = False

        history, _ = await actor.get_history()
        progress = await actor.get_progress()

        assert len(history) == 2
        assert progress.metrics.total_messages == 2
        assert progress.metrics.understanding_score == 10

    @pytest.mark.asyncio
    async def test_busy_while_save_is_pending(self, clock):
        release = asyncio.Event()

        class BlockingStore(FlakyStore):
            async def save(self, key, state):
                await release.wait()
                await super().save(key, state)

        actor = SessionActor("session_test_abc123", BlockingStore(), clock=clock)
        task = asyncio.create_task(actor.init())
        await asyncio.sleep(0)

        assert actor.busy

        release.set()
        await task

        assert not actor.busy


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
