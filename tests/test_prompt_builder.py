"""
Unit tests for agents/prompt_builder.py
Tests: schema keys in the prompt, variants, input validation, determinism.
"""

import pytest

from agents.prompt_builder import (
    LEGACY_QUESTION_COUNT,
    PromptBuilder,
    PromptValidationError,
)
from models.quiz_models import GenerationConfig


@pytest.fixture
def builder():
    return PromptBuilder()


class TestPromptContent:

    @pytest.mark.parametrize("topic", ["Python", "Spring Boot", "HTML & CSS", "C++", "{braces}"])
    def test_contains_topic_and_schema_keys(self, builder, topic):
        prompt, _ = builder.build(topic)
        assert topic in prompt
        for key in ('"question"', '"options"', '"correctAnswer"'):
            assert key in prompt

    def test_requests_ten_questions_by_default(self, builder):
        prompt, _ = builder.build("Git", "beginner")
        assert prompt.startswith("Generate 10 multiple-choice quiz questions about 'Git'")

    def test_difficulty_qualifies_prompt(self, builder):
        prompt, _ = builder.build("SQL", "advanced")
        assert "for a 'advanced' level developer" in prompt

    def test_no_difficulty_omits_level(self, builder):
        prompt, _ = builder.build("SQL")
        assert "level developer" not in prompt

    def test_forbids_wrapping_text(self, builder):
        prompt, _ = builder.build("React")
        assert "Do not include any introductory text, markdown formatting, or code fences" in prompt
        assert "only the JSON array" in prompt

    def test_inputs_are_trimmed(self, builder):
        prompt, _ = builder.build("  Java  ", " hard ")
        assert "'Java'" in prompt
        assert "'hard'" in prompt

    def test_config_requests_json(self, builder):
        _, config = builder.build("Java")
        assert config == GenerationConfig(responseMimeType="application/json")

    def test_custom_question_count(self):
        prompt, _ = PromptBuilder(num_questions=3).build("Java")
        assert prompt.startswith("Generate 3 multiple-choice")

    def test_legacy_prompt_asks_for_eight(self, builder):
        prompt, config = builder.build_legacy()
        assert prompt.startswith(f"Generate {LEGACY_QUESTION_COUNT} multiple-choice")
        assert '"correctAnswer"' in prompt
        assert config.responseMimeType == "application/json"


class TestPromptValidation:

    @pytest.mark.parametrize("topic", ["", "   ", "\t\n", None])
    def test_blank_topic_rejected(self, builder, topic):
        with pytest.raises(PromptValidationError):
            builder.build(topic)

    def test_blank_difficulty_rejected(self, builder):
        with pytest.raises(PromptValidationError):
            builder.build("Python", "  ")


class TestPromptDeterminism:

    def test_identical_inputs_give_identical_prompts(self, builder):
        first, _ = builder.build("Data Structures", "intermediate")
        second, _ = PromptBuilder().build("Data Structures", "intermediate")
        assert first.encode("utf-8") == second.encode("utf-8")
