"""Tests for TurnOrchestrator."""

import itertools

import pytest

from src.models.meeting import ActiveSet
from src.models.transcript import Transcript
from src.orchestration.turns import (
    FALLBACK_REPLY_TEXT,
    USER_DISPLAY_NAME,
    TurnOrchestrator,
)
from src.services.llm_client import LLMNotConfiguredError
from src.services.responder import ResponderError


class RecordingResponder:
    """Responder fake that records what each persona saw."""

    def __init__(self, fail_for: set[str] | None = None):
        self.fail_for = fail_for or set()
        self.calls: list[tuple[str, list[str], str]] = []

    async def __call__(self, persona, transcript, utterance):
        self.calls.append((persona.id, [e.content for e in transcript], utterance))
        if persona.id in self.fail_for:
            raise ResponderError(persona.id, "quota exceeded")
        return f"{persona.id} says hi"


@pytest.fixture
def orchestrator(registry) -> TurnOrchestrator:
    return TurnOrchestrator(registry)


@pytest.fixture
def transcript() -> Transcript:
    t = Transcript(persona_ids=["steve", "tom", "maya"])
    t.add("system", "System", "Meeting started.")
    return t


class TestComputeOrder:
    """Tests for compute_order."""

    def test_mention_moves_persona_to_front(self, orchestrator):
        order = orchestrator.compute_order("@Tom what do you think?", ["steve", "tom"])
        assert order == ["tom", "steve"]

    def test_no_mention_keeps_order(self, orchestrator):
        active = ["maya", "steve", "tom"]
        assert orchestrator.compute_order("What now?", active) == active

    def test_inactive_mention_keeps_order(self, orchestrator):
        assert orchestrator.compute_order("@Tom?", ["steve"]) == ["steve"]

    def test_others_keep_relative_order(self, orchestrator):
        order = orchestrator.compute_order(
            "@priya go first", ["steve", "tom", "priya", "maya", "lucas"]
        )
        assert order == ["priya", "steve", "tom", "maya", "lucas"]

    def test_already_first_is_unchanged(self, orchestrator):
        assert orchestrator.compute_order("@steve", ["steve", "tom"]) == ["steve", "tom"]

    def test_does_not_mutate_input(self, orchestrator):
        active = ["steve", "tom"]
        orchestrator.compute_order("@tom", active)
        assert active == ["steve", "tom"]

    def test_accepts_active_set(self, orchestrator):
        active = ActiveSet(["steve", "tom", "maya"])
        order = orchestrator.compute_order("@maya?", active)
        assert order == ["maya", "steve", "tom"]
        assert isinstance(order, list)
        assert active == ["steve", "tom", "maya"]

    @pytest.mark.parametrize(
        "utterance",
        ["", "hi", "@tom", "@STEVE @tom", "@maya!", "@nobody", "@hana", "@王"],
    )
    def test_always_a_permutation(self, orchestrator, registry, utterance):
        for size in range(1, 4):
            for active in itertools.permutations(registry.ids(), size):
                order = orchestrator.compute_order(utterance, list(active))
                assert len(order) == len(active)
                assert sorted(order) == sorted(active)


class TestRunTurn:
    """Tests for run_turn and stream_turn."""

    async def test_three_personas_produce_four_entries(self, orchestrator, transcript):
        responder = RecordingResponder()
        turn = await orchestrator.run_turn(
            "Let's plan the launch", transcript, ["steve", "tom", "maya"], responder
        )

        assert len(turn.entries) == 4
        assert turn.entries[0].speaker_id == "user"
        assert turn.entries[0].speaker_name == USER_DISPLAY_NAME
        assert [e.speaker_id for e in turn.entries[1:]] == ["steve", "tom", "maya"]
        assert turn.speaker_order == ["steve", "tom", "maya"]
        # Transcript extended in place: system notice + 4 new entries
        assert len(transcript) == 5
        assert list(transcript.entries[1:]) == turn.entries

    async def test_mentioned_persona_replies_first(self, orchestrator, transcript):
        responder = RecordingResponder()
        turn = await orchestrator.run_turn(
            "@Maya can we afford it?", transcript, ["steve", "tom", "maya"], responder
        )
        assert [e.speaker_id for e in turn.entries[1:]] == ["maya", "steve", "tom"]

    async def test_later_personas_see_earlier_replies(self, orchestrator, transcript):
        responder = RecordingResponder()
        await orchestrator.run_turn(
            "Ideas?", transcript, ["steve", "tom", "maya"], responder
        )

        seen = {pid: contents for pid, contents, _ in responder.calls}
        assert seen["steve"] == ["Meeting started.", "Ideas?"]
        assert seen["tom"] == ["Meeting started.", "Ideas?", "steve says hi"]
        assert seen["maya"][-2:] == ["steve says hi", "tom says hi"]
        assert all(u == "Ideas?" for _, _, u in responder.calls)

    async def test_failure_substitutes_fallback_and_continues(
        self, orchestrator, transcript
    ):
        responder = RecordingResponder(fail_for={"tom"})
        turn = await orchestrator.run_turn(
            "Thoughts?", transcript, ["steve", "tom", "maya"], responder
        )

        assert [e.content for e in turn.entries[1:]] == [
            "steve says hi",
            FALLBACK_REPLY_TEXT,
            "maya says hi",
        ]
        # maya still sees tom's fallback entry
        assert responder.calls[2][1][-1] == FALLBACK_REPLY_TEXT

    async def test_missing_credentials_propagate(self, orchestrator, transcript):
        async def unconfigured(persona, transcript, utterance):
            raise LLMNotConfiguredError("Set ANTHROPIC_API_KEY")

        with pytest.raises(LLMNotConfiguredError):
            await orchestrator.run_turn("Hi", transcript, ["steve"], unconfigured)
        # The user's entry was already appended and stays
        assert transcript.last.speaker_id == "user"

    async def test_blank_utterance_rejected(self, orchestrator, transcript):
        with pytest.raises(ValueError):
            await orchestrator.run_turn("   ", transcript, ["steve"], RecordingResponder())
        assert len(transcript) == 1

    async def test_requires_a_responder(self, orchestrator, transcript):
        with pytest.raises(ValueError, match="No responder"):
            await orchestrator.run_turn("Hi", transcript, ["steve"])

    async def test_default_responder_used(self, registry, transcript):
        responder = RecordingResponder()
        orchestrator = TurnOrchestrator(registry, respond=responder)
        turn = await orchestrator.run_turn("Hi", transcript, ["tom"])
        assert turn.entries[1].content == "tom says hi"

    async def test_stream_yields_incrementally(self, orchestrator, transcript):
        responder = RecordingResponder()
        stream = orchestrator.stream_turn("Hi", transcript, ["steve", "tom"], responder)

        first = await stream.__anext__()
        assert first.speaker_id == "user"
        assert responder.calls == []

        second = await stream.__anext__()
        assert second.speaker_id == "steve"
        assert len(responder.calls) == 1
        await stream.aclose()

        # Abandoned turn keeps what was appended, nothing more
        assert [e.speaker_id for e in transcript.entries[1:]] == ["user", "steve"]

    async def test_reply_delay(self, registry, transcript, monkeypatch):
        delays = []

        async def fake_sleep(seconds):
            delays.append(seconds)

        monkeypatch.setattr("src.orchestration.turns.asyncio.sleep", fake_sleep)
        orchestrator = TurnOrchestrator(registry, reply_delay_seconds=0.8)
        await orchestrator.run_turn("Hi", transcript, ["steve", "tom"], RecordingResponder())
        assert delays == [0.8, 0.8]
