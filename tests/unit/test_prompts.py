"""Unit tests for the workflow prompt catalog."""

from __future__ import annotations

import pytest

from rustdocs.errors import ErrorCode, RustDocsError
from rustdocs.prompts import PROMPTS, PROMPTS_BY_NAME, render_prompt

PROMPT_NAMES = [
    "implement-trait",
    "add-async-support",
    "handle-errors-idiomatically",
    "add-send-sync-bounds",
    "fix-lifetime-errors",
    "optimize-for-performance",
]


class TestCatalog:
    def test_all_prompts_registered(self) -> None:
        assert [p.name for p in PROMPTS] == PROMPT_NAMES
        assert set(PROMPTS_BY_NAME) == set(PROMPT_NAMES)

    @pytest.mark.parametrize("name", PROMPT_NAMES)
    def test_every_prompt_has_optional_version(self, name: str) -> None:
        args = {a.name: a for a in PROMPTS_BY_NAME[name].arguments}
        assert args["version"].required is False
        assert args["version"].default == "latest"

    def test_unknown_prompt(self) -> None:
        with pytest.raises(RustDocsError) as exc_info:
            render_prompt("write-my-code")
        assert exc_info.value.code == ErrorCode.PROMPT_NOT_FOUND
        assert exc_info.value.message == "Prompt not found: write-my-code"


class TestRender:
    def test_substitutes_arguments(self) -> None:
        text = render_prompt(
            "implement-trait",
            {"trait_name": "Serialize", "type_name": "Config", "crate_name": "serde"},
        )
        assert "implement the Serialize trait for Config" in text
        assert 'crate: "serde"' in text
        assert 'version: "latest"' in text
        assert "$" not in text

    def test_defaults_fill_missing_optionals(self) -> None:
        text = render_prompt("add-async-support", {"function_code": "fn read() {}"})
        assert "convert this synchronous function to async using tokio" in text
        assert "fn read() {}" in text

    def test_none_and_empty_values_use_defaults(self) -> None:
        text = render_prompt(
            "handle-errors-idiomatically",
            {"code": "x.unwrap()", "error_strategy": None, "version": ""},
        )
        assert "using Result and ?" in text
        assert "(version: latest)" in text

    def test_explicit_version_is_used(self) -> None:
        text = render_prompt("add-send-sync-bounds", {"code": "Rc::new(1)", "version": "1.80.0"})
        assert "(version: 1.80.0)" in text
        assert "for async tasks" in text

    def test_missing_required_argument(self) -> None:
        with pytest.raises(RustDocsError) as exc_info:
            render_prompt("implement-trait", {"trait_name": "Display"})
        assert exc_info.value.code == ErrorCode.INVALID_INPUT
        assert "type_name" in exc_info.value.message

    def test_optional_code_section(self) -> None:
        without = render_prompt("fix-lifetime-errors", {"error_message": "E0597"})
        assert "**Code:**" not in without

        with_code = render_prompt(
            "fix-lifetime-errors", {"error_message": "E0597", "code": "let r = &x;"}
        )
        assert "**Code:**\n```rust\nlet r = &x;\n```" in with_code

    def test_optional_bottleneck_line(self) -> None:
        without = render_prompt("optimize-for-performance", {"code": "v.clone()"})
        assert "Known bottleneck" not in without

        with_line = render_prompt(
            "optimize-for-performance", {"code": "v.clone()", "bottleneck": "allocations"}
        )
        assert "Known bottleneck: allocations" in with_line

    def test_dollar_in_user_code_is_preserved(self) -> None:
        text = render_prompt(
            "handle-errors-idiomatically", {"code": "macro_rules! m { ($x:expr) => {} }"}
        )
        assert "($x:expr)" in text
