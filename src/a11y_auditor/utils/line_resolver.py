# src/a11y_auditor/utils/line_resolver.py
import logging
import re
from typing import Dict, List, Optional, Pattern

logger = logging.getLogger(__name__)


class LineResolver:
    """
    Maps a parsed node back to a best-effort 1-based line in the original text.

    A literal pattern is built from the tag name and the node's attributes (in
    serialized order); attribute values are regex-escaped before compilation.
    The first line whose content matches wins. Attribute reordering, entity
    encoding or a tag split over several lines in the source all lead to None;
    that is the expected outcome of the heuristic, not an error.
    """

    def __init__(self, source: Optional[str]):
        self.lines: List[str] = (source or "").splitlines()
        self._cache: Dict[str, Optional[Pattern]] = {}

    @staticmethod
    def build_pattern(tag: str, attrs: Dict[str, str]) -> str:
        """Builds the (uncompiled) pattern for a tag and its attribute snapshot."""
        parts = [r"<(?i:" + re.escape(tag) + r")(?=[\s/>])"]
        for name, value in attrs.items():
            name_pattern = r"(?i:" + re.escape(name) + r")"
            if value == "":
                # Boolean attributes may be written bare or with an empty value
                parts.append(r"[^>]*?\s" + name_pattern + r"(?=[\s/>=])")
                continue
            escaped = re.escape(value)
            parts.append(
                r"[^>]*?\s" + name_pattern + r"\s*=\s*(?:\"" + escaped + r"\"|'" + escaped + r"'|" + escaped + r"(?=[\s/>]))"
            )
        return "".join(parts)

    def _compile(self, tag: str, attrs: Dict[str, str]) -> Optional[Pattern]:
        pattern = self.build_pattern(tag, attrs)
        if pattern not in self._cache:
            try:
                self._cache[pattern] = re.compile(pattern)
            except re.error as e:
                logger.warning(f"Could not compile line pattern for <{tag}>: {e}")
                self._cache[pattern] = None
        return self._cache[pattern]

    def resolve(self, node) -> Optional[int]:
        """
        Returns the first 1-based line matching `node`, or None.

        Args:
            node: Any object exposing `tag` and `attrs` (e.g. dom.models.Node).
        """
        compiled = self._compile(node.tag, node.attrs)
        if compiled is None:
            return None

        for number, line in enumerate(self.lines, start=1):
            if compiled.search(line):
                return number
        return None
