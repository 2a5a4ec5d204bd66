# src/a11y_auditor/dom/models.py
from typing import Optional, List, Dict, Iterable, Iterator, Union, Sequence
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from bs4 import Tag

from .selectors import parse_selector
from ..utils.contrast import parse_color


class Node(BaseModel):
    """
    Read-only view of one element in the parsed document.

    The underlying BeautifulSoup tag is held privately and only read, for
    serialization and text extraction. `index` is the position in document
    order; `parent_index` points at the enclosing element (None for top level).
    """
    model_config = ConfigDict(frozen=True)

    tag: str
    attrs: Dict[str, str] = Field(default_factory=dict)
    index: int
    parent_index: Optional[int] = None
    children: List['Node'] = Field(default_factory=list)
    style: Dict[str, str] = Field(default_factory=dict)

    _source: Optional[Tag] = PrivateAttr(default=None)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attrs.get(name, default)

    def has_attr(self, name: str) -> bool:
        return name in self.attrs

    def has_nonempty_attr(self, name: str) -> bool:
        """True if the attribute is present and not blank (mirrors a JS truthiness check)."""
        return bool((self.attrs.get(name) or "").strip())

    @property
    def text(self) -> str:
        """Text content, whitespace-collapsed and trimmed."""
        if self._source is None:
            return ""
        return " ".join(self._source.get_text(" ").split())

    @property
    def outer_html(self) -> str:
        """Serializes the element back to markup for reporting."""
        if self._source is None:
            return f"<{self.tag}>"
        return str(self._source)

    def computed_style(self, prop: str) -> Optional[str]:
        """Declared value for `prop` on this element (see StyleResolver for the approximation)."""
        return self.style.get(prop)


class Document(BaseModel):
    """
    Represents a parsed markup document.

    Holds every element in document order plus an attribute index built in the
    same traversal, and offers the selection vocabulary the rule set needs.
    Immutable after DOMBuilder.parse_doc returns it.
    """
    model_config = ConfigDict(frozen=True)

    source: str = ""
    roots: List[Node] = Field(default_factory=list)
    nodes: List[Node] = Field(default_factory=list)
    # attribute name -> attribute value -> nodes carrying it (document order)
    attribute_index: Dict[str, Dict[str, List[Node]]] = Field(default_factory=dict)

    # --- Structure ---

    @property
    def root(self) -> Optional[Node]:
        """
        The <html> element. A fragment has none: a browser would wrap it in an
        implicit <html> without attributes, so callers treat None the same way.
        """
        return self.first("html")

    @property
    def head(self) -> Optional[Node]:
        return self.first("head")

    @property
    def body(self) -> Optional[Node]:
        return self.first("body")

    @property
    def title(self) -> Optional[Node]:
        """The document title; <title> elements inside inline SVG name the graphic instead."""
        head = self.head
        candidates = [
            n for n in self.find_all("title")
            if not any(a.tag == "svg" for a in self.ancestors(n))
        ]
        if head is not None:
            in_head = [n for n in candidates if any(a is head for a in self.ancestors(n))]
            if in_head:
                return in_head[0]
        return candidates[0] if candidates else None

    def parent(self, node: Node) -> Optional[Node]:
        if node.parent_index is None:
            return None
        return self.nodes[node.parent_index]

    def ancestors(self, node: Node) -> Iterator[Node]:
        """Yields enclosing elements from the nearest outwards."""
        current = self.parent(node)
        while current is not None:
            yield current
            current = self.parent(current)

    def descendants(self, node: Node, tags: Optional[Iterable[str]] = None) -> Iterator[Node]:
        """Yields descendants in document order, optionally filtered by tag name."""
        wanted = set(tags) if tags else None
        stack = list(reversed(node.children))
        while stack:
            current = stack.pop()
            if wanted is None or current.tag in wanted:
                yield current
            stack.extend(reversed(current.children))

    def has_descendant(self, node: Node, tag: str) -> bool:
        return next(self.descendants(node, [tag]), None) is not None

    # --- Selection ---

    def find_all(self, tags: Union[str, Sequence[str]]) -> List[Node]:
        wanted = {tags} if isinstance(tags, str) else set(tags)
        return [n for n in self.nodes if n.tag in wanted]

    def first(self, tag: str) -> Optional[Node]:
        return next((n for n in self.nodes if n.tag == tag), None)

    def select(self, selector: str) -> List[Node]:
        """
        Returns the nodes matching a comma-separated union of simple selectors,
        in document order and without duplicates.
        """
        compounds = parse_selector(selector)
        return [n for n in self.nodes if any(c.matches(n) for c in compounds)]

    # --- Semantics ---

    def labels_for(self, node: Node) -> List[Node]:
        """
        Labels associated with a form control: <label for=...> matching its id,
        or an enclosing <label>.
        """
        labels: Dict[int, Node] = {}
        control_id = node.get("id")
        if control_id:
            for candidate in self.attribute_index.get("for", {}).get(control_id, []):
                if candidate.tag == "label":
                    labels[candidate.index] = candidate
        for ancestor in self.ancestors(node):
            if ancestor.tag == "label":
                labels[ancestor.index] = ancestor
        return [labels[i] for i in sorted(labels)]

    def effective_background(self, node: Node, default: Optional[str] = None) -> Optional[str]:
        """
        Nearest declared, parseable, non-transparent background colour on the
        node or its ancestors; `default` when none is declared.
        """
        for candidate in (node, *self.ancestors(node)):
            value = candidate.computed_style("background-color")
            color = parse_color(value)
            if color is not None and not color.is_transparent:
                return value
        return default
