"""Tests for model output cleaning and parsing."""
import pytest

from cleaner import clean_json_output, parse_model_output
from models import ChatAnswer, PartDescription

PISTON = '{"description": "A moving disc.", "technicalDetails": "Cast aluminium.", "functionSummary": "Compresses gas."}'


class TestCleanJsonOutput:
    def test_strips_json_fence(self):
        assert clean_json_output(f"```json\n{PISTON}\n```") == PISTON

    def test_strips_bare_fence(self):
        assert clean_json_output(f"```\n{PISTON}\n```") == PISTON

    def test_strips_fence_with_trailing_newline(self):
        assert clean_json_output(f"```json\n{PISTON}\n```\n") == PISTON

    def test_clean_text_is_unchanged(self):
        assert clean_json_output(PISTON) == PISTON

    @pytest.mark.parametrize(
        "text",
        [f"```json\n{PISTON}\n```", "```\nnot json\n```", "plain words", "", "```json```"],
    )
    def test_idempotent(self, text):
        once = clean_json_output(text)
        assert clean_json_output(once) == once

    def test_leaves_inner_backticks(self):
        text = '{"answer": "use `torque`"}'
        assert clean_json_output(text) == text


class TestParseModelOutput:
    def test_parses_fenced_description(self):
        parsed = parse_model_output(f"```json\n{PISTON}\n```", PartDescription)
        assert parsed == PartDescription(
            description="A moving disc.",
            technicalDetails="Cast aluminium.",
            functionSummary="Compresses gas.",
        )

    def test_drops_unknown_keys(self):
        parsed = parse_model_output('{"answer": "yes", "confidence": 0.9}', ChatAnswer)
        assert parsed.model_dump() == {"answer": "yes"}

    def test_invalid_json_returns_none(self):
        assert parse_model_output("Sure! Here is your answer.", ChatAnswer) is None

    def test_wrong_shape_returns_none(self):
        assert parse_model_output('{"description": "only one field"}', PartDescription) is None
        assert parse_model_output("[1, 2, 3]", ChatAnswer) is None

    def test_empty_reply_returns_none(self):
        assert parse_model_output("", ChatAnswer) is None
