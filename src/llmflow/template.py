"""Prompt templates with ``{{name}}`` placeholders.

The set of placeholder names is the template's variable contract. Formatting
is permissive: a variable missing from the input renders as an empty string.
Use :meth:`PromptTemplate.missing_variables` to check an input up front.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, FrozenSet, Mapping, Optional

_PLACEHOLDER = re.compile(r"{{(\w+)}}")


def parse_variables(template: str) -> FrozenSet[str]:
    """Return the distinct placeholder names used in ``template``."""
    return frozenset(_PLACEHOLDER.findall(template))


@dataclass(frozen=True)
class PromptTemplate:
    template: str
    variables: FrozenSet[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "variables", parse_variables(self.template))

    def missing_variables(self, inputs: Optional[Mapping[str, Any]]) -> FrozenSet[str]:
        provided = inputs or {}
        return frozenset(v for v in self.variables if v not in provided)

    def format(
        self, inputs: Optional[Mapping[str, Any]] = None, /, **kwargs: Any
    ) -> str:
        values = dict(inputs or {})
        values.update(kwargs)

        def repl(match: re.Match) -> str:
            value = values.get(match.group(1))
            return "" if value is None else str(value)

        return _PLACEHOLDER.sub(repl, self.template)


def create_prompt_template(template: str) -> PromptTemplate:
    return PromptTemplate(template)


def format_prompt(
    prompt_template: PromptTemplate, inputs: Optional[Mapping[str, Any]] = None
) -> str:
    return prompt_template.format(inputs)
