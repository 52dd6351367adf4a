"""Per-mode prefix trie over bound key sequences."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Optional

from .models import Binding, KeyStroke


@dataclass(slots=True)
class TrieNode:
    """Single trie node tracking the binding that ends here and child transitions."""

    binding_id: Optional[str] = None
    children: Dict[KeyStroke, "TrieNode"] = field(default_factory=dict)

    def child(self, stroke: KeyStroke) -> "TrieNode":
        node = self.children.get(stroke)
        if node is None:
            node = TrieNode()
            self.children[stroke] = node
        return node

    def walk(self) -> Iterator[str]:
        """Yield every binding id at or below this node."""

        stack = [self]
        while stack:
            node = stack.pop()
            if node.binding_id is not None:
                yield node.binding_id
            stack.extend(node.children.values())


@dataclass(slots=True)
class KeymapTrie:
    """Concrete trie built for a given mode."""

    mode: str
    root: TrieNode = field(default_factory=TrieNode)

    def add_binding(self, binding: Binding) -> None:
        node = self.root
        for stroke in binding.sequence.strokes:
            node = node.child(stroke)
        node.binding_id = binding.id

    def find(self, strokes: Iterable[KeyStroke]) -> Optional[TrieNode]:
        node = self.root
        for stroke in strokes:
            child = node.children.get(stroke)
            if child is None:
                return None
            node = child
        return node


__all__ = ["KeymapTrie", "TrieNode"]
