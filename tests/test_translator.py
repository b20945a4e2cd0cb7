"""Tests for canonical chat <-> provider translation."""

import pytest

from chatbridge.messages.translator import (
    build_gemini_payload,
    extract_texts,
    openai_to_canonical_response,
    to_canonical_response,
    to_openai_request,
    to_provider_request,
)
from chatbridge.types.results import (
    CONTENT_BLOCKED_MESSAGE,
    GENERIC_UPSTREAM_ERROR,
    ContentBlocked,
    Reply,
    UpstreamRejection,
)


# =============================================================================
# to_provider_request() tests
# =============================================================================

class TestToProviderRequest:
    """Tests for translating canonical messages into Gemini contents."""

    def test_system_folded_into_first_user_turn(self):
        """Test the system prompt is prepended with a blank line."""
        messages = [
            {"role": "system", "content": "S"},
            {"role": "user", "content": "U"},
        ]

        assert to_provider_request(messages) == [
            {"role": "user", "parts": [{"text": "S\n\nU"}]}
        ]

    def test_only_system_message_yields_empty_contents(self):
        """Test the prefix is discarded when nothing remains to carry it."""
        assert to_provider_request([{"role": "system", "content": "S"}]) == []

    def test_empty_input(self):
        """Test an empty conversation translates to empty contents."""
        assert to_provider_request([]) == []

    def test_assistant_first_without_system(self):
        """Test roles are remapped and content passes through."""
        messages = [
            {"role": "assistant", "content": "A"},
            {"role": "user", "content": "U"},
        ]

        assert to_provider_request(messages) == [
            {"role": "model", "parts": [{"text": "A"}]},
            {"role": "user", "parts": [{"text": "U"}]},
        ]

    def test_prefix_discarded_when_first_turn_is_not_user(self):
        """Test the system prompt is silently dropped before an assistant turn."""
        messages = [
            {"role": "system", "content": "S"},
            {"role": "assistant", "content": "A"},
            {"role": "user", "content": "U"},
        ]

        result = to_provider_request(messages)

        assert result == [
            {"role": "model", "parts": [{"text": "A"}]},
            {"role": "user", "parts": [{"text": "U"}]},
        ]

    def test_only_first_system_message_is_used(self):
        """Test later system messages are dropped, not folded or kept."""
        messages = [
            {"role": "user", "content": "U1"},
            {"role": "system", "content": "S1"},
            {"role": "assistant", "content": "A"},
            {"role": "system", "content": "S2"},
            {"role": "user", "content": "U2"},
        ]

        result = to_provider_request(messages)

        assert len(result) == 3
        assert result[0] == {"role": "user", "parts": [{"text": "S1\n\nU1"}]}
        assert extract_texts(result)[1:] == ["A", "U2"]
        assert all("S2" not in text for text in extract_texts(result))

    def test_prefix_only_applied_to_first_turn(self):
        """Test later user turns are never prefixed."""
        messages = [
            {"role": "system", "content": "S"},
            {"role": "user", "content": "U1"},
            {"role": "assistant", "content": "A"},
            {"role": "user", "content": "U2"},
        ]

        result = to_provider_request(messages)

        assert [c["parts"][0]["text"] for c in result] == ["S\n\nU1", "A", "U2"]
        assert [c["role"] for c in result] == ["user", "model", "user"]

    def test_unknown_roles_map_to_model(self):
        """Test any role other than user becomes model."""
        result = to_provider_request([{"role": "tool", "content": "T"}])

        assert result == [{"role": "model", "parts": [{"text": "T"}]}]

    def test_empty_system_content_still_adds_separator(self):
        """Test an empty system prompt still contributes the blank line."""
        messages = [
            {"role": "system", "content": ""},
            {"role": "user", "content": "U"},
        ]

        assert to_provider_request(messages)[0]["parts"][0]["text"] == "\n\nU"

    @pytest.mark.parametrize(
        "messages",
        [
            [{"role": "user", "content": "hello"}],
            [
                {"role": "user", "content": "line one\nline two"},
                {"role": "assistant", "content": "  padded  "},
                {"role": "user", "content": "ünïcödé ✓"},
            ],
            [
                {"role": "assistant", "content": ""},
                {"role": "assistant", "content": "twice"},
            ],
        ],
    )
    def test_content_preserved_without_system(self, messages):
        """Test length and content are preserved byte-for-byte without a system message."""
        result = to_provider_request(messages)

        assert len(result) == len(messages)
        assert extract_texts(result) == [m["content"] for m in messages]

    def test_round_trip_modulo_system_folding(self):
        """Test extracted text reproduces the conversation with the system prompt folded."""
        messages = [
            {"role": "system", "content": "Be brief."},
            {"role": "user", "content": "Weather?"},
            {"role": "assistant", "content": "Sunny."},
            {"role": "user", "content": "Tomorrow?"},
        ]

        texts = extract_texts(to_provider_request(messages))

        assert texts == ["Be brief.\n\nWeather?", "Sunny.", "Tomorrow?"]

    def test_input_is_not_mutated(self):
        """Test the caller's messages are left untouched."""
        messages = [
            {"role": "system", "content": "S"},
            {"role": "user", "content": "U"},
        ]

        to_provider_request(messages)

        assert messages[1] == {"role": "user", "content": "U"}

    def test_accepts_generator(self):
        """Test any iterable of messages is accepted."""
        messages = ({"role": r, "content": c} for r, c in [("system", "S"), ("user", "U")])

        assert extract_texts(to_provider_request(messages)) == ["S\n\nU"]


class TestBuildGeminiPayload:
    """Tests for full generateContent request bodies."""

    def test_contents_only(self):
        payload = build_gemini_payload([{"role": "user", "content": "hi"}])

        assert payload == {"contents": [{"role": "user", "parts": [{"text": "hi"}]}]}

    def test_with_generation_config(self):
        payload = build_gemini_payload(
            [{"role": "user", "content": "hi"}],
            generation_config={"response_mime_type": "application/json"},
        )

        assert payload["generationConfig"] == {"response_mime_type": "application/json"}


# =============================================================================
# to_canonical_response() tests
# =============================================================================

class TestToCanonicalResponse:
    """Tests for translating Gemini responses into chat results."""

    def test_extracts_first_candidate_text(self):
        """Test the first part of the first candidate becomes the reply."""
        body = {
            "candidates": [
                {"content": {"parts": [{"text": "first"}, {"text": "second"}]}},
                {"content": {"parts": [{"text": "other"}]}},
            ]
        }

        result = to_canonical_response(200, body)

        assert result == Reply("first")
        assert result.as_canonical() == {"reply": "first"}

    def test_empty_candidates_is_blocked_not_error(self):
        """Test an empty candidate list yields the fallback with success status."""
        result = to_canonical_response(200, {"candidates": []})

        assert isinstance(result, ContentBlocked)
        assert result.status_code == 200
        assert result.text == CONTENT_BLOCKED_MESSAGE
        assert result.text == (
            "I could not generate a response. The prompt may have been blocked for safety reasons."
        )

    def test_missing_candidates_is_blocked(self):
        """Test a prompt-feedback-only body is treated as blocked."""
        body = {"promptFeedback": {"blockReason": "SAFETY"}}

        assert isinstance(to_canonical_response(200, body), ContentBlocked)

    def test_candidate_without_content_is_blocked(self):
        """Test a candidate stopped by safety filters is treated as blocked."""
        body = {"candidates": [{"finishReason": "SAFETY"}]}

        assert isinstance(to_canonical_response(200, body), ContentBlocked)

    def test_candidate_without_text_part_is_blocked(self):
        """Test content with no text part is treated as blocked."""
        body = {"candidates": [{"content": {"role": "model", "parts": []}}]}

        assert isinstance(to_canonical_response(200, body), ContentBlocked)

    def test_empty_body_is_blocked(self):
        assert isinstance(to_canonical_response(200, None), ContentBlocked)

    @pytest.mark.parametrize(
        "body",
        [
            {"candidates": {"0": 1}},
            {"candidates": "text"},
            {"candidates": [{"content": "oops"}]},
            {"candidates": [{"content": ["parts"]}]},
            {"candidates": [{"content": {"parts": "text"}}]},
            {"candidates": [{"content": {"parts": ["text"]}}]},
        ],
    )
    def test_malformed_success_body_is_blocked(self, body):
        """Test unexpected shapes in a 2xx body are treated as blocked content."""
        assert isinstance(to_canonical_response(200, body), ContentBlocked)

    @pytest.mark.parametrize("text", [None, 42, {"nested": "x"}])
    def test_non_string_text_is_blocked(self, text):
        """Test a text part that is not a string never becomes a reply."""
        body = {"candidates": [{"content": {"parts": [{"text": text}]}}]}

        assert isinstance(to_canonical_response(200, body), ContentBlocked)

    def test_empty_text_is_a_reply(self):
        body = {"candidates": [{"content": {"parts": [{"text": ""}]}}]}

        assert to_canonical_response(200, body) == Reply("")

    def test_error_message_and_status_relayed(self):
        """Test a non-2xx status relays the upstream message and status."""
        body = {"error": {"code": 403, "message": "X", "status": "PERMISSION_DENIED"}}

        result = to_canonical_response(403, body)

        assert result == UpstreamRejection("X", 403)
        assert result.to_payload() == {"error": {"message": "X"}}

    def test_error_without_message_uses_generic_text(self):
        """Test the generic phrase is used when the upstream gives no message."""
        result = to_canonical_response(503, {})

        assert result == UpstreamRejection(GENERIC_UPSTREAM_ERROR, 503)

    def test_error_status_wins_over_candidates(self):
        """Test a non-2xx status is an error even if candidates are present."""
        body = {"candidates": [{"content": {"parts": [{"text": "hi"}]}}]}

        assert isinstance(to_canonical_response(500, body), UpstreamRejection)


# =============================================================================
# OpenAI tests
# =============================================================================

class TestOpenAITranslation:
    """Tests for the OpenAI pass-through variant."""

    def test_messages_pass_through(self):
        """Test system messages and roles are forwarded unchanged."""
        messages = [
            {"role": "system", "content": "S"},
            {"role": "user", "content": "U"},
            {"role": "system", "content": "S2"},
        ]

        payload = to_openai_request(messages, "gpt-3.5-turbo")

        assert payload == {"model": "gpt-3.5-turbo", "messages": messages}

    def test_response_format_added(self):
        payload = to_openai_request(
            [{"role": "user", "content": "U"}],
            "gpt-3.5-turbo",
            response_format={"type": "json_object"},
        )

        assert payload["response_format"] == {"type": "json_object"}

    def test_extracts_first_choice_content(self):
        body = {"choices": [{"message": {"role": "assistant", "content": "hello"}}]}

        assert openai_to_canonical_response(200, body) == Reply("hello")

    def test_no_choices_is_blocked(self):
        assert isinstance(openai_to_canonical_response(200, {"choices": []}), ContentBlocked)

    def test_null_content_is_blocked(self):
        body = {"choices": [{"message": {"role": "assistant", "content": None}, "finish_reason": "content_filter"}]}

        assert isinstance(openai_to_canonical_response(200, body), ContentBlocked)

    @pytest.mark.parametrize(
        "body",
        [
            {"choices": {"0": 1}},
            {"choices": "text"},
            {"choices": ["oops"]},
            {"choices": [{"message": "oops"}]},
            {"choices": [{"message": {"content": 7}}]},
        ],
    )
    def test_malformed_success_body_is_blocked(self, body):
        assert isinstance(openai_to_canonical_response(200, body), ContentBlocked)

    def test_error_relayed(self):
        body = {"error": {"message": "Incorrect API key provided", "type": "invalid_request_error"}}

        assert openai_to_canonical_response(401, body) == UpstreamRejection(
            "Incorrect API key provided", 401
        )
