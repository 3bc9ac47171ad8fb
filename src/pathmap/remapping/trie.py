"""Prefix trie over '/'-separated path segments."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from pathmap.remapping.types import PrefixMatch

SEPARATOR = "/"


@dataclass
class TrieNode:
    """Node in a prefix trie.

    Attributes:
        children: Child nodes keyed by path segment.
        value: Replacement prefix, set only on nodes that end a configured prefix.
    """

    children: dict[str, TrieNode] = field(default_factory=dict)
    value: str | None = None


class PrefixTrie:
    """Maps sandbox path prefixes to replacement prefixes.

    Paths are split on '/' without dropping empty segments, so an absolute
    path starts with the "" segment and "/a/b" and "a/b" are distinct keys.

    Example:
        trie = PrefixTrie()
        trie.insert("/sandbox/src", "/home/dev/project")

        trie.longest_match("/sandbox/src/foo/bar.h")
        # PrefixMatch(prefix="/sandbox/src", replacement="/home/dev/project")
        trie.longest_match("/other/foo.h")  # None
    """

    def __init__(self) -> None:
        self._root = TrieNode()
        self._count = 0

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> PrefixTrie:
        """Build a trie holding every prefix -> replacement pair of mapping."""
        trie = cls()
        for prefix, replacement in mapping.items():
            trie.insert(prefix, replacement)
        return trie

    def __len__(self) -> int:
        return self._count

    def insert(self, prefix_path: str, replacement: str) -> None:
        """Insert a prefix; inserting the same prefix again overwrites its replacement."""
        node = self._root
        for segment in prefix_path.split(SEPARATOR):
            if segment not in node.children:
                node.children[segment] = TrieNode()
            node = node.children[segment]
        if node.value is None:
            self._count += 1
        node.value = replacement

    def longest_match(self, path: str) -> PrefixMatch | None:
        """Walk path's segments down the trie and report the node reached.

        The walk is greedy: it consumes segments while a child exists and
        stops at the first segment without one. Only the node where the walk
        stops is considered. A terminal passed on the way down to a deeper
        non-terminal node does not produce a match.

        Returns:
            The consumed prefix and its replacement, or None when the node
            reached carries no replacement.
        """
        node = self._root
        consumed: list[str] = []
        for segment in path.split(SEPARATOR):
            child = node.children.get(segment)
            if child is None:
                break
            consumed.append(segment)
            node = child

        if node.value is None:
            return None
        return PrefixMatch(prefix=SEPARATOR.join(consumed), replacement=node.value)
