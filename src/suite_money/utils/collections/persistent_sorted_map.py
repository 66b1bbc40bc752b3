from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")

_MISSING: Any = object()


class _Node:
    """Immutable AVL tree node. Nodes are shared between map versions and never modified."""

    __slots__ = ("key", "value", "left", "right", "height")

    def __init__(self, key, value, left: _Node | None, right: _Node | None):
        self.key = key
        self.value = value
        self.left = left
        self.right = right
        self.height = max(_height(left), _height(right)) + 1


class PersistentSortedMap(Generic[K, V], Mapping[K, V]):
    """Immutable mapping ordered by key, backed by a persistent AVL tree.

    Every update (`set`, `remove`) returns a new map that shares all untouched nodes with
    the original, so an update costs O(log n) time and memory while the original stays
    valid and unchanged. Keys must be totally ordered and hashable-consistent with
    their ordering (two keys are the same key when neither is less than the other).

    Type Parameters:
        K: Key type.
        V: Value type.

    Examples:
        >>> empty = PersistentSortedMap()
        >>> one = empty.set("USD", 10)
        >>> two = one.set("EUR", 5)
        >>> list(two)          # ['EUR', 'USD']
        >>> len(one)           # 1 - unchanged by the second update
    """

    __slots__ = ("_root", "_len")

    def __init__(self, items: Iterable[tuple[K, V]] = ()):
        """Initialize a map from (key, value) pairs; later pairs win for equal keys."""
        root: _Node | None = None
        length = 0
        for key, value in items:
            root, added = _insert(root, key, value)
            if added:
                length += 1
        self._root = root
        self._len = length

    @classmethod
    def _from_root(cls, root: _Node | None, length: int) -> PersistentSortedMap[K, V]:
        result = cls.__new__(cls)
        result._root = root
        result._len = length
        return result

    # region Updates

    def set(self, key: K, value: V) -> PersistentSortedMap[K, V]:
        """Return a new map with $key mapped to $value."""
        root, added = _insert(self._root, key, value)
        return self._from_root(root, self._len + 1 if added else self._len)

    def remove(self, key: K) -> PersistentSortedMap[K, V]:
        """Return a new map without $key; returns this map when $key is absent."""
        root, removed = _remove(self._root, key)
        if not removed:
            return self
        return self._from_root(root, self._len - 1)

    # endregion

    # region Mapping

    def get(self, key: K, default: V | None = None) -> V | None:
        node = _find(self._root, key)
        return default if node is None else node.value

    def __getitem__(self, key: K) -> V:
        node = _find(self._root, key)
        if node is None:
            raise KeyError(key)
        return node.value

    def __contains__(self, key: object) -> bool:
        try:
            return _find(self._root, key) is not None
        except TypeError:
            return False

    def __len__(self) -> int:
        return self._len

    def __iter__(self) -> Iterator[K]:
        for node in _iter_nodes(self._root):
            yield node.key

    def iter_items(self) -> Iterator[tuple[K, V]]:
        """Iterate (key, value) pairs in key order."""
        for node in _iter_nodes(self._root):
            yield node.key, node.value

    # endregion

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({len(self)} items)"


# region Tree operations


def _height(node: _Node | None) -> int:
    return node.height if node is not None else 0


def _rotate_right(node: _Node) -> _Node:
    pivot = node.left
    return _Node(pivot.key, pivot.value, pivot.left, _Node(node.key, node.value, pivot.right, node.right))


def _rotate_left(node: _Node) -> _Node:
    pivot = node.right
    return _Node(pivot.key, pivot.value, _Node(node.key, node.value, node.left, pivot.left), pivot.right)


def _balance(key, value, left: _Node | None, right: _Node | None) -> _Node:
    """Build a node from its parts, rotating when the subtree heights differ by more than one."""
    left_height = _height(left)
    right_height = _height(right)

    if left_height > right_height + 1:
        if _height(left.left) < _height(left.right):
            left = _rotate_left(left)
        return _rotate_right(_Node(key, value, left, right))

    if right_height > left_height + 1:
        if _height(right.right) < _height(right.left):
            right = _rotate_right(right)
        return _rotate_left(_Node(key, value, left, right))

    return _Node(key, value, left, right)


def _find(node: _Node | None, key) -> _Node | None:
    while node is not None:
        if key < node.key:
            node = node.left
        elif node.key < key:
            node = node.right
        else:
            return node
    return None


def _insert(node: _Node | None, key, value) -> tuple[_Node, bool]:
    """Insert or replace $key; returns the new subtree and whether a key was added."""
    if node is None:
        return _Node(key, value, None, None), True

    if key < node.key:
        left, added = _insert(node.left, key, value)
        return _balance(node.key, node.value, left, node.right), added

    if node.key < key:
        right, added = _insert(node.right, key, value)
        return _balance(node.key, node.value, node.left, right), added

    # Same key: replace the value, the shape of the tree does not change
    return _Node(key, value, node.left, node.right), False


def _remove(node: _Node | None, key) -> tuple[_Node | None, bool]:
    """Remove $key; returns the new subtree and whether a key was removed."""
    if node is None:
        return None, False

    if key < node.key:
        left, removed = _remove(node.left, key)
        if not removed:
            return node, False
        return _balance(node.key, node.value, left, node.right), True

    if node.key < key:
        right, removed = _remove(node.right, key)
        if not removed:
            return node, False
        return _balance(node.key, node.value, node.left, right), True

    if node.left is None:
        return node.right, True
    if node.right is None:
        return node.left, True

    # Two children: the in-order successor takes the place of the removed node
    successor = node.right
    while successor.left is not None:
        successor = successor.left
    right, _ = _remove(node.right, successor.key)
    return _balance(successor.key, successor.value, node.left, right), True


def _iter_nodes(node: _Node | None) -> Iterator[_Node]:
    """In-order traversal without recursion."""
    stack: list[_Node] = []
    while stack or node is not None:
        while node is not None:
            stack.append(node)
            node = node.left
        node = stack.pop()
        yield node
        node = node.right


# endregion
