"""Tests for the append-only chat transcripts."""

import pytest

from models.case_state import INTAKE_GREETING, CaseState
from models.transcript import MessageRole, Transcript


class TestTranscript:

    def test_turns_are_kept_in_order(self):
        transcript = Transcript('intake')
        transcript.append_user_turn('first')
        transcript.append_agent_turn('second')
        transcript.append_user_turn('third')

        assert [m.content for m in transcript] == ['first', 'second', 'third']
        assert [m.role for m in transcript] == [MessageRole.USER, MessageRole.AGENT, MessageRole.USER]
        assert len(transcript) == 3

    def test_messages_view_is_read_only(self):
        transcript = Transcript('intake')
        transcript.append_user_turn('hello')

        messages = transcript.messages
        assert isinstance(messages, tuple)
        with pytest.raises(Exception):
            messages[0].content = 'edited'

    def test_timestamps_never_go_backwards(self):
        transcript = Transcript('resolution')
        for i in range(5):
            transcript.append_user_turn(str(i))
        stamps = [m.timestamp for m in transcript]
        assert stamps == sorted(stamps)

    def test_to_list_is_json_ready(self):
        transcript = Transcript('intake')
        transcript.append_agent_turn('hi')
        entry = transcript.to_list()[0]

        assert entry['role'] == 'agent'
        assert entry['content'] == 'hi'
        assert isinstance(entry['timestamp'], str)


class TestCaseTranscripts:

    def test_intake_is_seeded_with_greeting(self):
        state = CaseState('case-1')

        assert len(state.intake_transcript) == 1
        greeting = state.intake_transcript.messages[0]
        assert greeting.role == MessageRole.AGENT
        assert greeting.content == INTAKE_GREETING

    def test_resolution_transcript_starts_empty_and_separate(self):
        state = CaseState('case-1')
        state.resolution_transcript.append_user_turn('question')

        assert len(state.resolution_transcript) == 1
        assert len(state.intake_transcript) == 1
