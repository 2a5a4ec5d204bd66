# src/a11y_auditor/dom/selectors.py
import re
from functools import lru_cache
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict


class SelectorError(ValueError):
    """Raised when a rule uses a selector outside the supported vocabulary."""


class AttributeTest(BaseModel):
    """A single [name] or [name='value'] predicate."""
    model_config = ConfigDict(frozen=True)

    name: str
    value: Optional[str] = None

    def matches(self, attrs) -> bool:
        if self.name not in attrs:
            return False
        return self.value is None or attrs[self.name] == self.value


class CompoundSelector(BaseModel):
    """An optional tag name followed by attribute predicates, e.g. meta[name='viewport']."""
    model_config = ConfigDict(frozen=True)

    tag: Optional[str] = None
    attributes: Tuple[AttributeTest, ...] = ()

    def matches(self, node) -> bool:
        if self.tag is not None and node.tag != self.tag:
            return False
        return all(test.matches(node.attrs) for test in self.attributes)


_GROUP_SEPARATOR = re.compile(r",(?![^\[]*\])")
_TAG = re.compile(r"[a-zA-Z][a-zA-Z0-9-]*|\*")
_ATTRIBUTE = re.compile(
    r"""\[\s*([a-zA-Z_:][-a-zA-Z0-9_:.]*)\s*(?:=\s*(?:'([^']*)'|"([^"]*)"|([^\s\]'"]+))\s*)?\]"""
)


def _parse_compound(text: str) -> CompoundSelector:
    pos = 0
    tag = None
    match = _TAG.match(text)
    if match:
        tag = None if match.group(0) == "*" else match.group(0).lower()
        pos = match.end()

    tests = []
    while pos < len(text):
        match = _ATTRIBUTE.match(text, pos)
        if not match:
            raise SelectorError(f"Unsupported selector syntax: {text!r}")
        name, single, double, bare = match.groups()
        value = next((v for v in (single, double, bare) if v is not None), None)
        tests.append(AttributeTest(name=name.lower(), value=value))
        pos = match.end()

    if tag is None and not tests and text != "*":
        raise SelectorError(f"Empty selector: {text!r}")
    return CompoundSelector(tag=tag, attributes=tuple(tests))


@lru_cache(maxsize=128)
def parse_selector(selector: str) -> Tuple[CompoundSelector, ...]:
    """
    Parses the small selector vocabulary used by the rules:
    comma-separated unions of `tag`, `*`, `[attr]` and `[attr='value']` compounds.
    Combinators and pseudo-classes are not supported.
    """
    parts: List[CompoundSelector] = []
    for raw in _GROUP_SEPARATOR.split(selector):
        text = raw.strip()
        if not text:
            raise SelectorError(f"Empty selector group in {selector!r}")
        parts.append(_parse_compound(text))
    return tuple(parts)
