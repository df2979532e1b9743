"""
Prompt Library

Named system-prompt templates. Templates are ``string.Template`` strings
with three placeholders:

  $cwd                    workspace root shown to the model
  $modification_tag_name  tag the client uses to report user edits
  $allowed_html_elements  markup the client can render
"""

import logging
from dataclasses import dataclass, field
from string import Template
from typing import Dict, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

DEFAULT_PROMPT_ID = "default"
MODIFICATIONS_TAG_NAME = "modifications"

ALLOWED_HTML_ELEMENTS = (
    "a", "b", "blockquote", "br", "code", "dd", "del", "details", "div",
    "dl", "dt", "em", "h1", "h2", "h3", "h4", "h5", "h6", "hr", "i", "ins",
    "kbd", "li", "ol", "p", "pre", "q", "rp", "rt", "ruby", "s", "samp",
    "source", "span", "strike", "strong", "sub", "summary", "sup", "table",
    "tbody", "td", "tfoot", "th", "thead", "tr", "ul", "var",
)


@dataclass
class PromptOptions:
    cwd: str = "/home/project"
    modification_tag_name: str = MODIFICATIONS_TAG_NAME
    allowed_html_elements: Sequence[str] = field(default_factory=lambda: ALLOWED_HTML_ELEMENTS)

    def substitutions(self) -> Dict[str, str]:
        return {
            "cwd": self.cwd,
            "modification_tag_name": self.modification_tag_name,
            "allowed_html_elements": ", ".join(f"<{tag}>" for tag in self.allowed_html_elements),
        }


@dataclass(frozen=True)
class PromptTemplate:
    label: str
    description: str
    template: str

    def render(self, options: PromptOptions) -> str:
        return Template(self.template).safe_substitute(options.substitutions())


DEFAULT_TEMPLATE = """\
You are an expert software engineer working inside a browser-based development
environment. You write complete, working code and explain only what matters.

<system_constraints>
  The workspace root is $cwd. Every path you mention is relative to it.
  The environment runs JavaScript/TypeScript natively; native binaries and
  compilers for other languages are not available.
  Prefer built-in tooling and small, dependency-light solutions.
</system_constraints>

<message_formatting_info>
  You can make the output pretty by using only the following available HTML
  elements: $allowed_html_elements
</message_formatting_info>

<diff_spec>
  For user-made file modifications, a `<$modification_tag_name>` section will
  appear at the start of the user message. It contains either `<diff>` or
  `<file>` elements for each modified file:

    - `<diff path="/some/file/path.ext">`: GNU unified diff format changes
    - `<file path="/some/file/path.ext">`: the full new content of the file

  Always work from the latest version of each file.
</diff_spec>

<code_formatting_info>
  Use 2 spaces for code indentation.
</code_formatting_info>

Think step by step before answering, then give the complete solution: every
file you create or change is shown in full, never with placeholders such as
"rest of the code stays the same".
"""

OPTIMIZED_TEMPLATE = """\
You are a senior engineer in a browser sandbox rooted at $cwd.
Answer with complete, runnable code. Keep prose short.
User edits arrive in a `<$modification_tag_name>` block as `<diff>` or `<file>`
elements; always build on the newest version.
Formatting: only these HTML elements render: $allowed_html_elements
"""

CONCISE_TEMPLATE = """\
You are a coding assistant. Workspace: $cwd.
Reply briefly. Show full files when you change them.
"""


class PromptLibrary:
    """
    Registry of named prompt templates.

    ``get_prompt`` returns None for unknown ids; callers decide the
    fallback.
    """

    def __init__(self):
        self._templates: Dict[str, PromptTemplate] = {
            DEFAULT_PROMPT_ID: PromptTemplate(
                label="Default Prompt",
                description="Battle-tested default system prompt",
                template=DEFAULT_TEMPLATE,
            ),
            "optimized": PromptTemplate(
                label="Optimized Prompt",
                description="Shorter prompt for lower token usage",
                template=OPTIMIZED_TEMPLATE,
            ),
            "concise": PromptTemplate(
                label="Concise Prompt",
                description="Minimal prompt for small models",
                template=CONCISE_TEMPLATE,
            ),
        }

    def register(self, prompt_id: str, template: PromptTemplate) -> None:
        if prompt_id in self._templates:
            logger.warning(f"Prompt template {prompt_id} already registered, overwriting")
        self._templates[prompt_id] = template

    def list_prompts(self) -> List[Tuple[str, str, str]]:
        return [(pid, t.label, t.description) for pid, t in self._templates.items()]

    def get_prompt(self, prompt_id: str, options: Optional[PromptOptions] = None) -> Optional[str]:
        template = self._templates.get(prompt_id)
        if template is None:
            return None
        return template.render(options or PromptOptions())

    def get_default_prompt(self, options: Optional[PromptOptions] = None) -> str:
        return self._templates[DEFAULT_PROMPT_ID].render(options or PromptOptions())
