# src/a11y_auditor/dom/builder.py
import logging
from typing import Dict, List, Optional
from bs4 import BeautifulSoup, Tag

from .models import Document, Node
from .styles import StyleResolver

logger = logging.getLogger(__name__)


def _normalize_attrs(tag: Tag) -> Dict[str, str]:
    """
    Flattens BeautifulSoup attributes to plain strings.
    Multi-valued attributes (class, rel, ...) are joined by a single space.
    """
    attrs = {}
    for name, value in tag.attrs.items():
        if isinstance(value, (list, tuple)):
            value = " ".join(value)
        attrs[name.lower()] = "" if value is None else str(value)
    return attrs


def _child_tags(tag: Tag) -> List[Tag]:
    return [child for child in tag.children if isinstance(child, Tag)]


class DOMBuilder:
    """
    Builder responsible for parsing raw markup into a read-only Document.

    Parsing is permissive: unclosed tags and missing structure never raise,
    the result is simply a best-effort (possibly empty) tree.
    """

    def __init__(self, parser: str = "html.parser"):
        self.parser = parser

    def parse_doc(self, html: Optional[str]) -> Document:
        """
        Parses raw markup into a Document.

        Args:
            html (str): The raw markup string. None and empty strings are accepted.

        Returns:
            Document: Nodes in document order plus an attribute index.
        """
        if not html:
            return Document(source=html or "")

        # Basic cleanup of potentially dirty input (e.g., BOM). Line structure is kept intact
        # so that line numbers reported later match the original text.
        clean_html = html.replace('\ufeff', '')
        soup = BeautifulSoup(clean_html, self.parser)
        styles = StyleResolver(soup)

        nodes = self._build_nodes(soup, styles)
        roots = [node for node in nodes if node.parent_index is None]

        attribute_index: Dict[str, Dict[str, List[Node]]] = {}
        for node in nodes:
            for name, value in node.attrs.items():
                attribute_index.setdefault(name, {}).setdefault(value, []).append(node)

        logger.debug(f"Parsed document: {len(nodes)} elements, {len(roots)} top-level.")
        return Document(source=html, roots=roots, nodes=nodes, attribute_index=attribute_index)

    def _build_nodes(self, soup: BeautifulSoup, styles: StyleResolver) -> List[Node]:
        """
        Builds a Node for every element without recursion, so nesting depth is
        bounded by memory only (unclosed <li> or <div> runs nest very deep).

        A first pass walks the tags in pre-order with an explicit stack and
        assigns indices and parent links. Nodes are then frozen in reverse index
        order, so every child exists before its parent is created.
        """
        tags: List[Tag] = []
        parents: List[Optional[int]] = []
        child_indices: List[List[int]] = []

        stack = [(child, None) for child in reversed(_child_tags(soup))]
        while stack:
            tag, parent_index = stack.pop()
            index = len(tags)
            tags.append(tag)
            parents.append(parent_index)
            child_indices.append([])
            if parent_index is not None:
                child_indices[parent_index].append(index)
            stack.extend((child, index) for child in reversed(_child_tags(tag)))

        nodes: List[Optional[Node]] = [None] * len(tags)
        for index in range(len(tags) - 1, -1, -1):
            tag = tags[index]
            node = Node(
                tag=tag.name.lower(),
                attrs=_normalize_attrs(tag),
                index=index,
                parent_index=parents[index],
                children=[nodes[i] for i in child_indices[index]],
                style=styles.styles_for(tag)
            )
            node._source = tag
            nodes[index] = node

        return nodes  # type: ignore[return-value]
