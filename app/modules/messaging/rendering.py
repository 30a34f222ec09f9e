"""Template rendering.

Placeholders have the form ``{name}``. The name is everything up to the next
closing brace, trimmed, so ``{ user }`` and ``{user}`` refer to the same
variable. Nested braces are not interpreted. Rendering is pure: no I/O and
the same input always produces the same output.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from modules.messaging.domain.errors import MissingVariableError

PLACEHOLDER_PATTERN = re.compile(r"\{([^}]+)\}")


@dataclass(frozen=True)
class RenderRequest:
    subject: str
    body: str
    variables: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RenderedContent:
    subject: str
    body: str


def extract_variables(*texts: Optional[str]) -> List[str]:
    """Return placeholder names across ``texts``, deduplicated in first-seen order."""
    names: Dict[str, None] = {}
    for text in texts:
        if not text:
            continue
        for match in PLACEHOLDER_PATTERN.finditer(text):
            names.setdefault(match.group(1).strip(), None)
    return list(names)


def find_missing_variables(required: List[str], variables: Dict[str, Any]) -> List[str]:
    return [name for name in required if name not in variables]


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def render_text(text: str, variables: Dict[str, Any]) -> str:
    """Substitute every placeholder in ``text``.

    Raises:
        MissingVariableError: for the first placeholder without a value.
    """

    def substitute(match: "re.Match[str]") -> str:
        name = match.group(1).strip()
        if name not in variables:
            raise MissingVariableError(name)
        return _stringify(variables[name])

    return PLACEHOLDER_PATTERN.sub(substitute, text)


class TemplateRenderer:
    """Renders subject and body of a RenderRequest."""

    def render(self, request: RenderRequest) -> RenderedContent:
        return RenderedContent(
            subject=render_text(request.subject, request.variables),
            body=render_text(request.body, request.variables),
        )

    def extract_variables(self, subject: Optional[str], body: Optional[str]) -> List[str]:
        return extract_variables(subject, body)
