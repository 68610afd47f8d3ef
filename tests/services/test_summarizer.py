"""Tests for MeetingSummarizer."""

import pytest

from src.models.summary import ActionItemStatus, SummaryRecord
from src.models.transcript import Transcript
from src.services.llm_client import LLMClientError, LLMNotConfiguredError
from src.services.summarizer import MeetingSummarizer, SummarizerError


@pytest.fixture
def transcript() -> Transcript:
    t = Transcript()
    t.add("system", "System", "Meeting started. Please state your topic.")
    t.add("user", "You", "We need a pricing model.")
    t.add("maya", "Maya Chen", "Start with a freemium tier.")
    return t


async def test_summarize_returns_model_output(mock_llm_client, transcript):
    summarizer = MeetingSummarizer(mock_llm_client, max_tokens=2000)
    record = await summarizer.summarize(transcript.entries)

    assert record.topic == "Launch plan"
    assert mock_llm_client.extract.call_args.args[1] is SummaryRecord
    assert mock_llm_client.extract.call_args.kwargs["max_tokens"] == 2000


async def test_system_entries_are_excluded(mock_llm_client, transcript):
    summarizer = MeetingSummarizer(mock_llm_client)
    await summarizer.summarize(transcript.entries)

    prompt = mock_llm_client.extract.call_args.args[0]
    assert "You: We need a pricing model." in prompt
    assert "Maya Chen: Start with a freemium tier." in prompt
    assert "Meeting started" not in prompt


async def test_empty_transcript_does_not_call_model(mock_llm_client):
    summarizer = MeetingSummarizer(mock_llm_client)
    record = await summarizer.summarize([])

    assert record.key_points == []
    assert record.action_items == []
    mock_llm_client.extract.assert_not_called()


async def test_only_system_entries_counts_as_empty(mock_llm_client):
    transcript = Transcript()
    transcript.add("system", "System", "Meeting started.")
    record = await MeetingSummarizer(mock_llm_client).summarize(transcript)

    assert record.key_points == []
    mock_llm_client.extract.assert_not_called()


async def test_llm_failure_returns_fallback(mock_llm_client, transcript):
    mock_llm_client.extract.side_effect = LLMClientError("network down")
    record = await MeetingSummarizer(mock_llm_client).summarize(transcript.entries)

    assert record.is_fallback
    assert record.key_points == []
    assert record.action_items == []


async def test_malformed_payload_returns_fallback(mock_llm_client, transcript):
    mock_llm_client.extract.return_value = {"keyPoints": "not a list"}
    record = await MeetingSummarizer(mock_llm_client).summarize(transcript.entries)
    assert record.is_fallback


async def test_none_payload_returns_fallback(mock_llm_client, transcript):
    mock_llm_client.extract.return_value = None
    record = await MeetingSummarizer(mock_llm_client).summarize(transcript.entries)
    assert record.is_fallback


async def test_missing_credentials_propagate(mock_llm_client, transcript):
    mock_llm_client.extract.side_effect = LLMNotConfiguredError("no key")
    with pytest.raises(LLMNotConfiguredError):
        await MeetingSummarizer(mock_llm_client).summarize(transcript.entries)


class TestValidatePayload:
    """Tests for validate_payload."""

    def test_dict_without_decision_tree(self):
        record = MeetingSummarizer.validate_payload(
            {
                "topic": "Hiring",
                "keyPoints": ["Two engineers"],
                "actionItems": [{"task": "Post roles", "owner": "Priya", "status": "Done"}],
                "conclusion": "Hire in Q2.",
            }
        )
        assert record.decision_tree is None
        assert record.action_items[0].status == ActionItemStatus.DONE

    def test_json_string(self):
        record = MeetingSummarizer.validate_payload(
            '{"topic": "T", "keyPoints": [], "conclusion": "C", '
            '"decisionTree": [{"step": "Why", "options": ["a"]}]}'
        )
        assert record.decision_tree[0].step == "Why"

    def test_invalid_json_string(self):
        with pytest.raises(SummarizerError):
            MeetingSummarizer.validate_payload("{not json")

    def test_missing_required_field(self):
        with pytest.raises(SummarizerError):
            MeetingSummarizer.validate_payload({"topic": "T"})

    def test_bad_status(self):
        with pytest.raises(SummarizerError):
            MeetingSummarizer.validate_payload(
                {
                    "topic": "T",
                    "conclusion": "C",
                    "actionItems": [{"task": "x", "status": "Someday"}],
                }
            )
