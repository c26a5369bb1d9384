"""Workflow prompt templates for common Rust tasks.

Each template walks an agent through a multi-step task that starts with the
documentation tools (search_crates, get_crate_overview, get_item_docs,
list_modules). Rendering is plain ``string.Template`` substitution; optional
arguments that are not supplied fall back to literal defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from string import Template
from typing import TYPE_CHECKING

from rustdocs.errors import ErrorCode, RustDocsError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping


@dataclass(frozen=True)
class PromptArgument:
    name: str
    description: str
    required: bool = False
    default: str = ""


@dataclass(frozen=True)
class WorkflowPrompt:
    name: str
    description: str
    arguments: tuple[PromptArgument, ...]
    template: str
    # Extra template values computed from the resolved arguments
    derive: Callable[[dict[str, str]], dict[str, str]] | None = None

    def render(self, args: Mapping[str, str | None] | None = None) -> str:
        supplied = {k: v for k, v in (args or {}).items() if v}
        missing = [a.name for a in self.arguments if a.required and a.name not in supplied]
        if missing:
            raise RustDocsError(
                code=ErrorCode.INVALID_INPUT,
                message=f"Prompt '{self.name}' is missing required arguments: {', '.join(missing)}",
                suggestion="Supply every required argument listed by prompts/list.",
                recoverable=False,
            )
        values = {a.name: supplied.get(a.name, a.default) for a in self.arguments}
        if self.derive is not None:
            values.update(self.derive(values))
        return Template(self.template).safe_substitute(values)


def _version_argument(description: str) -> PromptArgument:
    return PromptArgument("version", description, default="latest")


def _optional_code_block(values: dict[str, str]) -> dict[str, str]:
    code = values.get("code", "")
    return {"code_section": f"**Code:**\n```rust\n{code}\n```\n" if code else ""}


def _optional_bottleneck(values: dict[str, str]) -> dict[str, str]:
    bottleneck = values.get("bottleneck", "")
    return {"bottleneck_line": f"Known bottleneck: {bottleneck}\n" if bottleneck else ""}


_IMPLEMENT_TRAIT = """\
I need to implement the $trait_name trait for $type_name.

**IMPORTANT: Use the MCP tools to get up-to-date documentation. DO NOT rely on training data.**

Follow this workflow:

1. **Query the documentation** (REQUIRED):
   - Use the 'get_item_docs' tool to fetch $trait_name trait documentation from $crate_name
   - If the item isn't found at the crate root, use the 'list_modules' tool to locate the \
module that contains it and re-call 'get_item_docs' with the correct module path
   - Parameters: { crate: "$crate_name", version: "$version", item_type: "trait", \
item_name: "$trait_name" }
   - This gives you: required methods, trait bounds, and current API

2. **Analyze what you found**:
   - What methods need to be implemented?
   - What trait bounds are required?
   - Are there any associated types?

3. **Provide implementation**:
   - Implement all required methods based on docs
   - Add proper error handling if needed
   - Follow patterns from the documentation
   - Include helpful comments

4. **Explain your implementation**:
   - Why this approach is idiomatic
   - Any trade-offs made
   - Common mistakes to avoid

**Start by querying the trait documentation using the get_item_docs tool.**"""

_ADD_ASYNC_SUPPORT = """\
I need to convert this synchronous function to async using $runtime:

```rust
$function_code
```

**IMPORTANT: Use MCP tools to get current $runtime documentation.**

Workflow:

1. **Query $runtime documentation**:
   - Use 'get_crate_overview' for $runtime (version: $version) to understand async patterns
   - If a helpful item isn't found, use 'list_modules' for the crate to locate the module \
path and fetch the item docs for types/functions used in the code
   - Use 'get_item_docs' for specific types you need (e.g., tokio::task::spawn) with \
version $version
   - Get up-to-date API information, don't rely on training data

2. **Analyze the code**:
   - Identify I/O operations that should be async
   - Check for blocking calls that need async alternatives

3. **Convert to async**:
   - Update function signature to async
   - Add .await calls based on $runtime docs
   - Handle Send/Sync bounds as documented
   - Update error handling for async

4. **Provide result**:
   - Complete async version
   - Explanation of changes
   - Testing suggestions from docs

**Start by querying $runtime documentation using the tools.**"""

_HANDLE_ERRORS = """\
I need to add idiomatic error handling to this Rust code using $error_strategy:

```rust
$code
```

**IMPORTANT: Query documentation for current error handling patterns.**

Workflow:

1. **Query documentation** (if using thiserror/anyhow):
   - Use 'get_crate_overview' for the error handling crate (version: $version)
   - If specific types/macros aren't found, use 'list_modules' to find their module path, \
then fetch the item docs
   - Use 'get_item_docs' for specific error types/macros with version $version
   - Get current best practices from docs

2. **Analyze the code**:
   - Identify operations that can fail
   - Find panics/unwraps that need replacement

3. **Implement error handling**:
   - Define error types based on docs (if using thiserror)
   - Replace panics with proper error handling
   - Use ? operator for propagation
   - Add helpful error messages

4. **Show usage**:
   - How to handle at call site
   - Follow patterns from documentation

**Query the relevant crate docs first using the tools.**"""

_SEND_SYNC = """\
I need to add Send/Sync bounds for $use_case:

```rust
$code
```

**IMPORTANT: Query std documentation for Send/Sync definitions.**

Workflow:

1. **Query documentation**:
   - Use 'get_item_docs' for std::marker::Send trait (version: $version)
   - If any type is missing, call 'list_modules' for the crate to find its actual module
   - Use 'get_item_docs' for std::marker::Sync trait (version: $version)
   - Understand what types implement these traits

2. **Analyze the code**:
   - Identify where Send/Sync bounds are needed
   - Find non-Send/Sync types in the code

3. **Fix the code**:
   - Add appropriate trait bounds based on docs
   - Replace non-Send/Sync types (Rc → Arc, RefCell → Mutex)
   - Verify compatibility with $use_case

4. **Provide result**:
   - Corrected code
   - Explanation of changes
   - Why these bounds are required

**Start by querying Send/Sync trait documentation.**"""

_FIX_LIFETIMES = """\
I'm getting a lifetime error in my Rust code:

**Error:**
```
$error_message
```

$code_section
**IMPORTANT: Use MCP tools if the error mentions specific types or traits.**

Workflow:

1. **Query docs if needed**:
   - If the error mentions a specific type/trait, use 'get_item_docs' to understand it \
(use version $version if applicable). If not found, run 'list_modules' to find the correct \
module path
   - Check lifetime requirements in the type's documentation
   - Get current API information

2. **Analyze the error**:
   - Explain what the error means in simple terms
   - Identify the lifetime issue
   - Check if types involved have specific lifetime requirements

3. **Suggest solutions**:
   - Multiple approaches if applicable
   - When to use 'static vs lifetime parameters vs owned types
   - Show corrected code

4. **Provide prevention tips**:
   - How to avoid similar errors
   - Patterns from documentation

**Query relevant type docs if the error references specific types.**"""

_OPTIMIZE = """\
I need to optimize this Rust code for performance:

```rust
$code
```

$bottleneck_line
**IMPORTANT: Query documentation for performance-optimized alternatives.**

Workflow:

1. **Query relevant docs**:
   - If using collections, query std::collections docs for performance characteristics \
(use version: $version if applicable)
   - If a particular type is not found, use 'list_modules' to find it within the crate \
and re-query
   - If using async, query runtime docs for performance tips (use version: $version if \
applicable)
   - Check documentation for performance notes on types used

2. **Identify issues**:
   - Unnecessary allocations
   - Clone/copy overhead
   - Inefficient algorithms (check docs for time complexity)
   - Lock contention
   - Cache misses

3. **Suggest improvements** based on docs:
   - Zero-copy techniques from documentation
   - Better data structures (with perf characteristics from docs)
   - Parallelization opportunities
   - Memory layout optimization

4. **Provide result**:
   - Optimized code with benchmarking suggestions
   - Trade-offs from documentation
   - When NOT to optimize

**Query std or relevant crate docs for performance guidance first.**"""


PROMPTS: tuple[WorkflowPrompt, ...] = (
    WorkflowPrompt(
        name="implement-trait",
        description="Guide for implementing a trait for a type",
        arguments=(
            PromptArgument("trait_name", "Name of the trait to implement", required=True),
            PromptArgument(
                "type_name", "Name of the type implementing the trait", required=True
            ),
            PromptArgument(
                "crate_name",
                "Crate containing the trait (e.g., 'std', 'serde')",
                default="the documentation",
            ),
            _version_argument("Crate version to use when querying documentation"),
        ),
        template=_IMPLEMENT_TRAIT,
    ),
    WorkflowPrompt(
        name="add-async-support",
        description="Guide for adding async support to a function",
        arguments=(
            PromptArgument("function_code", "Current synchronous function code", required=True),
            PromptArgument("runtime", "Async runtime to use (tokio, async-std)", default="tokio"),
            _version_argument("Crate/runtime version to use when querying documentation"),
        ),
        template=_ADD_ASYNC_SUPPORT,
    ),
    WorkflowPrompt(
        name="handle-errors-idiomatically",
        description="Guide for idiomatic error handling in Rust",
        arguments=(
            PromptArgument("code", "Code that needs error handling", required=True),
            PromptArgument(
                "error_strategy",
                "Error handling strategy (Result, thiserror, anyhow)",
                default="Result and ?",
            ),
            _version_argument("Crate version to use for documentation queries"),
        ),
        template=_HANDLE_ERRORS,
    ),
    WorkflowPrompt(
        name="add-send-sync-bounds",
        description="Guide for adding Send/Sync trait bounds",
        arguments=(
            PromptArgument("code", "Code needing Send/Sync bounds", required=True),
            PromptArgument("use_case", "Use case (threading, async, both)", default="async tasks"),
            _version_argument("Crate version if documentation should be a specific version"),
        ),
        template=_SEND_SYNC,
    ),
    WorkflowPrompt(
        name="fix-lifetime-errors",
        description="Guide for fixing lifetime-related compiler errors",
        arguments=(
            PromptArgument(
                "error_message", "Compiler error message about lifetimes", required=True
            ),
            PromptArgument("code", "Code with lifetime issues"),
            _version_argument("Crate version for documentation lookups during debugging"),
        ),
        template=_FIX_LIFETIMES,
        derive=_optional_code_block,
    ),
    WorkflowPrompt(
        name="optimize-for-performance",
        description="Guide for optimizing Rust code for performance",
        arguments=(
            PromptArgument("code", "Code to optimize", required=True),
            PromptArgument("bottleneck", "Known performance bottleneck"),
            _version_argument("Crate version used when consulting docs for performance patterns"),
        ),
        template=_OPTIMIZE,
        derive=_optional_bottleneck,
    ),
)

PROMPTS_BY_NAME: dict[str, WorkflowPrompt] = {prompt.name: prompt for prompt in PROMPTS}


def render_prompt(name: str, args: Mapping[str, str | None] | None = None) -> str:
    """Render the named workflow prompt with ``args`` substituted."""
    prompt = PROMPTS_BY_NAME.get(name)
    if prompt is None:
        raise RustDocsError(
            code=ErrorCode.PROMPT_NOT_FOUND,
            message=f"Prompt not found: {name}",
            suggestion=f"Available prompts: {', '.join(PROMPTS_BY_NAME)}.",
            recoverable=False,
        )
    return prompt.render(args)
