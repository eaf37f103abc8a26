"""
apps.configuration.engine.node
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Strict, tree-structured container for configuration values.

A :class:`Node` behaves like a small ordered mapping with four differences
from a plain ``dict``:

* Reading an undefined key raises :class:`NotFound`; keys holding ``None``
  have to be defined explicitly.
* Keys must be ``str``.  Anything else is rejected on read and on assignment.
* Values are converted on the way in: mappings become Nodes, lists and
  tuples have their items converted, and :class:`Deferred` values are kept
  as-is and evaluated on every read.
* A tree can be frozen with :meth:`Node.freeze`; after that every write
  raises :class:`ReadOnlyNode`.  The loader freezes every tree it exposes.

Example::

    node = Node({"a": None})
    node["a"] = {"b": 12}
    node["a"]["b"]                        # -> 12
    node["missing"]                       # raises NotFound
    node.deep_merge({"a": {"c": 34}})
    node.to_dict()                        # -> {"a": {"b": 12, "c": 34}}

This module is **pure Python** and has no Django imports, so configuration
can be read before Django is set up.
"""
from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Any

from .exceptions import InvalidKeyType, InvalidStructure, NotFound, ReadOnlyNode


class Deferred:
    """
    A zero-argument computation stored as a configuration value.

    The wrapped callable runs each time the owning key is read; the result
    is never cached.
    """

    __slots__ = ("func",)

    def __init__(self, func: Callable[[], Any]) -> None:
        if not callable(func):
            raise TypeError(f"{func!r} is not callable")
        self.func = func

    def __call__(self) -> Any:
        return self.func()

    def __repr__(self) -> str:
        return f"Deferred({self.func!r})"


class Node:
    """Ordered, string-keyed configuration tree."""

    __slots__ = ("_data", "_frozen")

    def __init__(self, data: Mapping | Node | None = None) -> None:
        self._data: dict[str, Any] = {}
        self._frozen = False
        if data is None:
            return
        if isinstance(data, Node):
            data = data._data
        if not isinstance(data, Mapping):
            raise InvalidStructure(f"{data!r} is not a mapping")
        for key in data:
            if not isinstance(key, str):
                raise InvalidStructure(f"keys must be str, {key!r} is not")
        for key, value in data.items():
            self._data[key] = _convert(value)

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def get(self, key: str) -> Any:
        """
        Return the value stored at *key*.

        Deferred values are evaluated on every call.

        Raises:
            InvalidKeyType: If *key* is not a ``str``.
            NotFound: If *key* is not defined.
        """
        _check_key(key)
        try:
            value = self._data[key]
        except KeyError:
            raise NotFound(key) from None
        return value() if isinstance(value, Deferred) else value

    def set(self, key: str, value: Any) -> None:
        """Convert *value* and store it under *key*."""
        _check_key(key)
        if self._frozen:
            raise ReadOnlyNode(key)
        self._data[key] = _convert(value)

    __getitem__ = get
    __setitem__ = set

    def has_key(self, key: str) -> bool:
        """Return whether *key* is defined, without evaluating its value."""
        return key in self._data

    __contains__ = has_key

    def present(self, *keys: str) -> bool:
        """
        Return ``True`` if the value at ``self[k1][k2]...`` is set.

        Every segment must exist and hold a truthy value, and every segment
        but the last must be a Node.  Used to probe optional settings::

            if config.present("cdn_proxy", "host"):
                ...
        """
        if not keys:
            raise ValueError("supply at least one key")
        key, rest = keys[0], keys[1:]
        if not self.has_key(key):
            return False
        value = self[key]
        if not value:
            return False
        if not rest:
            return True
        if isinstance(value, Node):
            return value.present(*rest)
        return False

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------

    def items(self) -> Iterator[tuple[str, Any]]:
        """
        Yield ``(key, value)`` pairs in insertion order.

        Iterates over a snapshot taken when the generator starts, so the
        node may be modified during iteration.  Deferred values are
        evaluated as they are reached.
        """
        for key, value in list(self._data.items()):
            yield key, value() if isinstance(value, Deferred) else value

    def keys(self) -> list[str]:
        return list(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._data))

    def __len__(self) -> int:
        return len(self._data)

    # ------------------------------------------------------------------
    # Merge / export
    # ------------------------------------------------------------------

    def deep_merge(self, other: Mapping | Node | None) -> Node:
        """
        Merge *other* into this node in place and return ``self``.

        For each incoming key:

        * both sides are Nodes: merge recursively;
        * the incoming value is ``None`` and the existing one is a Node:
          keep the existing Node;
        * otherwise the incoming value replaces the existing one.  Lists
          are replaced wholesale, never concatenated.

        Returning ``self`` allows folding several override layers::

            Node().deep_merge(common).deep_merge(production)
        """
        if self._frozen:
            raise ReadOnlyNode()
        if other is None:
            return self
        incoming = other if isinstance(other, Node) else Node(other)
        for key, other_value in list(incoming._data.items()):
            value = self._data.get(key)
            if isinstance(value, Node) and isinstance(other_value, Node):
                value.deep_merge(other_value)
            elif isinstance(value, Node) and other_value is None:
                continue
            else:
                self._data[key] = _convert(other_value)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Return a fully materialized copy made of dicts, lists and scalars."""
        return {key: _materialize(value) for key, value in self.items()}

    def copy(self) -> Node:
        """Return a writable structural copy; deferred values are carried over as-is."""
        return Node(self)

    def freeze(self) -> Node:
        """
        Make this tree read-only, recursively, and return ``self``.

        Writes raise :class:`ReadOnlyNode`; lists become tuples.  Deferred
        values keep working since they only read.  Use :meth:`copy` to get a
        writable tree back.
        """
        for key, value in self._data.items():
            self._data[key] = _freeze(value)
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Node({self._data!r})"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _check_key(key: object) -> None:
    if not isinstance(key, str):
        raise InvalidKeyType(key)


def _convert(value: Any) -> Any:
    """Turn mappings into Nodes, deeply, always producing an owned copy."""
    if isinstance(value, (Node, Mapping)):
        return Node(value)
    if isinstance(value, (list, tuple)):
        return [_convert(item) for item in value]
    return value


def _freeze(value: Any) -> Any:
    if isinstance(value, Node):
        return value.freeze()
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _materialize(value: Any) -> Any:
    if isinstance(value, Node):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_materialize(item) for item in value]
    return value
