"""
Tests for the prompt library.
"""

from modelrelay.core.prompts import (
    DEFAULT_PROMPT_ID,
    PromptLibrary,
    PromptOptions,
    PromptTemplate,
)


def test_builtin_prompts_are_listed():
    ids = [pid for pid, _, _ in PromptLibrary().list_prompts()]
    assert ids == [DEFAULT_PROMPT_ID, "optimized", "concise"]


def test_placeholders_are_substituted():
    prompt = PromptLibrary().get_default_prompt(PromptOptions(cwd="/work", modification_tag_name="edits"))
    assert "/work" in prompt
    assert "<edits>" in prompt
    assert "<blockquote>" in prompt
    assert "$cwd" not in prompt
    assert "$modification_tag_name" not in prompt


def test_unknown_prompt_returns_none():
    assert PromptLibrary().get_prompt("does-not-exist") is None


def test_known_prompt_renders():
    library = PromptLibrary()
    concise = library.get_prompt("concise", PromptOptions(cwd="/srv"))
    assert concise.startswith("You are a coding assistant. Workspace: /srv.")
    assert concise != library.get_default_prompt()


def test_register_custom_template():
    library = PromptLibrary()
    library.register("tiny", PromptTemplate("Tiny", "One line", "Root is $cwd, cost is $$5"))
    assert library.get_prompt("tiny", PromptOptions(cwd="/x")) == "Root is /x, cost is $5"
    assert ("tiny", "Tiny", "One line") in library.list_prompts()


def test_unknown_placeholders_are_left_alone():
    template = PromptTemplate("T", "", "keep $unknown here")
    assert template.render(PromptOptions()) == "keep $unknown here"
