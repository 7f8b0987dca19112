"""
Unit tests for chat prompt templates.

WHAT: Test plain/chat strategies, baseline markers, family templates
WHY: The prompt string is the only chat structure the engine sees
HOW: Render typed messages with and without a fake engine handle
"""

import pytest

from llm_providers.llm.red_candle.templates import (
    format_prompt,
    has_roles,
    render_baseline,
    render_plain,
)
from llm_providers.llm.types import ChatMessage
from tests.fixtures.fake_candle import FakeLLM


def msgs(*pairs):
    return [ChatMessage(role=role, content=content) for role, content in pairs]


@pytest.mark.unit
class TestBaselineTemplate:
    """Test the <|role|> baseline template."""

    def test_one_marker_line_per_message_in_order(self):
        messages = msgs(("system", "S"), ("user", "U1"), ("assistant", "A1"), ("user", "U2"))
        prompt = render_baseline(messages)

        lines = prompt.splitlines()
        markers = [line for line in lines if line.startswith("<|")]
        assert markers == ["<|system|>", "<|user|>", "<|assistant|>", "<|user|>", "<|assistant|>"]
        assert prompt == (
            "<|system|>\nS\n<|user|>\nU1\n<|assistant|>\nA1\n<|user|>\nU2\n<|assistant|>\n"
        )

    def test_trailing_assistant_marker_after_assistant_message(self):
        prompt = render_baseline(msgs(("user", "Hi"), ("assistant", "Hello")))

        assert prompt.endswith("Hello\n<|assistant|>\n")
        assert not prompt.endswith("<|assistant|>\n<|assistant|>\n")

    def test_unknown_role_gets_generic_marker(self):
        prompt = render_baseline(msgs(("user", "Hi"), ("tool", "42")))
        assert "<|tool|>\n42\n" in prompt

    def test_roleless_message_kept_without_marker(self):
        prompt = render_baseline([ChatMessage("user", "Hi"), ChatMessage(None, "loose text")])
        assert prompt == "<|user|>\nHi\nloose text\n<|assistant|>\n"


@pytest.mark.unit
class TestPlainStrategy:
    """Test prompts built from role-less messages."""

    def test_contents_joined_by_newline(self):
        messages = [ChatMessage(None, "line one"), ChatMessage(None, "line two")]

        assert not has_roles(messages)
        assert format_prompt(messages) == "line one\nline two"
        assert render_plain(messages) == "line one\nline two"

    def test_no_markers_even_with_engine(self):
        llm = FakeLLM("Qwen/Qwen2-7B-Instruct")
        prompt = format_prompt([ChatMessage(None, "Complete this:")], llm)
        assert prompt == "Complete this:"
        assert "<|" not in prompt


@pytest.mark.unit
class TestTemplateSelection:
    """Test engine/family/baseline precedence."""

    def test_engine_template_preferred(self):
        llm = FakeLLM("TinyLlama/TinyLlama-1.1B-Chat-v1.0")
        llm.chat_template = "ENGINE TEMPLATE"

        assert format_prompt(msgs(("user", "Hi")), llm) == "ENGINE TEMPLATE"
        assert llm.calls[-1]["messages"] == [{"role": "user", "content": "Hi"}]

    def test_empty_engine_template_falls_back_to_baseline(self):
        llm = FakeLLM("TinyLlama/TinyLlama-1.1B-Chat-v1.0")
        assert format_prompt(msgs(("user", "Hi")), llm) == "<|user|>\nHi\n<|assistant|>\n"

    def test_no_engine_uses_baseline(self):
        assert format_prompt(msgs(("user", "Hi"))) == "<|user|>\nHi\n<|assistant|>\n"

    def test_qwen_uses_chatml(self):
        llm = FakeLLM("Qwen/Qwen2.5-7B-Instruct")
        prompt = format_prompt(msgs(("system", "S"), ("user", "Hi")), llm)

        assert prompt == (
            "<|im_start|>system\nS<|im_end|>\n"
            "<|im_start|>user\nHi<|im_end|>\n"
            "<|im_start|>assistant\n"
        )

    def test_gemma_folds_system_into_user_turn(self):
        llm = FakeLLM("google/gemma-2b-it")
        prompt = format_prompt(msgs(("system", "S"), ("user", "Hi"), ("assistant", "Yo")), llm)

        assert prompt == (
            "<start_of_turn>user\nS\n\nHi<end_of_turn>\n"
            "<start_of_turn>model\nYo<end_of_turn>\n"
            "<start_of_turn>model\n"
        )

    def test_messages_never_dropped(self):
        llm = FakeLLM("mistralai/Mistral-7B-Instruct-v0.3")
        contents = ["first", "second", "third", "fourth"]
        messages = msgs(*zip(["system", "user", "assistant", "user"], contents))

        prompt = format_prompt(messages, llm)
        positions = [prompt.index(c) for c in contents]
        assert positions == sorted(positions)

    def test_roleless_message_skips_engine_template(self):
        llm = FakeLLM("TinyLlama/TinyLlama-1.1B-Chat-v1.0")
        llm.chat_template = "ENGINE TEMPLATE"
        messages = [ChatMessage("user", "Hi"), ChatMessage(None, "loose text")]

        assert format_prompt(messages, llm) == "<|user|>\nHi\nloose text\n<|assistant|>\n"
        assert not any(call["method"] == "apply_chat_template" for call in llm.calls)
