# src/a11y_auditor/dom/styles.py
import logging
import re
from typing import Dict, List, Tuple

import soupsieve
from bs4 import BeautifulSoup, Tag

from ..utils.contrast import parse_color

logger = logging.getLogger(__name__)

# Properties the rule set reads. Everything else in author CSS is ignored.
TRACKED_PROPERTIES = {"color", "background-color", "zoom", "text-size-adjust"}

_PROPERTY_ALIASES = {
    "-webkit-text-size-adjust": "text-size-adjust",
    "-moz-text-size-adjust": "text-size-adjust",
    "-ms-text-size-adjust": "text-size-adjust",
}

_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_RULE = re.compile(r"([^{}]+)\{([^{}]*)\}")
_IMPORTANT = re.compile(r"\s*!\s*important\s*$", re.IGNORECASE)


def parse_declarations(text: str) -> Dict[str, str]:
    """
    Parses a declaration block ("color: red; zoom: 1") into tracked properties.
    Later declarations override earlier ones, as in CSS.
    """
    declarations: Dict[str, str] = {}
    for chunk in (text or "").split(";"):
        if ":" not in chunk:
            continue
        name, value = chunk.split(":", 1)
        name = name.strip().lower()
        value = _IMPORTANT.sub("", value.strip())
        if not value:
            continue

        name = _PROPERTY_ALIASES.get(name, name)
        if name == "background":
            # Only a shorthand consisting of a single colour is understood
            if parse_color(value) is None:
                continue
            name = "background-color"

        if name in TRACKED_PROPERTIES:
            declarations[name] = value
    return declarations


def _strip_at_rules(css: str) -> str:
    """Removes @-rule blocks (including nested ones like @media) and @-statements."""
    out: List[str] = []
    i = 0
    while i < len(css):
        if css[i] == "@":
            brace = css.find("{", i)
            semi = css.find(";", i)
            if semi != -1 and (brace == -1 or semi < brace):
                i = semi + 1
                continue
            if brace == -1:
                break
            depth, j = 1, brace + 1
            while j < len(css) and depth:
                if css[j] == "{":
                    depth += 1
                elif css[j] == "}":
                    depth -= 1
                j += 1
            i = j
            continue
        out.append(css[i])
        i += 1
    return "".join(out)


def parse_stylesheet(css: str) -> List[Tuple[str, Dict[str, str]]]:
    """Splits a stylesheet into (selector, tracked declarations) pairs in source order."""
    css = _strip_at_rules(_COMMENT.sub("", css or ""))
    rules = []
    for selector, body in _RULE.findall(css):
        declarations = parse_declarations(body)
        if declarations:
            rules.append((selector.strip(), declarations))
    return rules


class StyleResolver:
    """
    Approximates computed style from declared values only.

    Rules from <style> blocks are matched with soupsieve and applied in source
    order (specificity is not modelled), then inline `style` attributes win.
    No inheritance, layout or cascade origin handling is performed; callers
    that need an inherited value walk the ancestors themselves.
    """

    def __init__(self, soup: BeautifulSoup):
        self._styles: Dict[int, Dict[str, str]] = {}
        self._apply_stylesheets(soup)
        self._apply_inline(soup)

    def _apply_stylesheets(self, soup: BeautifulSoup) -> None:
        for style_tag in soup.find_all("style"):
            for selector, declarations in parse_stylesheet(style_tag.get_text()):
                try:
                    matched = soupsieve.select(selector, soup)
                except (soupsieve.SelectorSyntaxError, NotImplementedError) as e:
                    logger.debug(f"Skipping unsupported CSS selector '{selector}': {e}")
                    continue
                for tag in matched:
                    self._styles.setdefault(id(tag), {}).update(declarations)

    def _apply_inline(self, soup: BeautifulSoup) -> None:
        for tag in soup.find_all(style=True):
            declarations = parse_declarations(tag.get("style", ""))
            if declarations:
                self._styles.setdefault(id(tag), {}).update(declarations)

    def styles_for(self, tag: Tag) -> Dict[str, str]:
        return dict(self._styles.get(id(tag), {}))
