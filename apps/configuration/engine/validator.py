"""
apps.configuration.engine.validator
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Declarative validation of a configuration :class:`Node`.

A rule set is an ordered tuple of rule objects.  :class:`Validator` runs
them in order and raises :class:`ValidationFailure` on the first violation,
so a configuration that reaches the caller has satisfied every rule.

Example::

    RULES = (
        HasKeys("host", "port"),
        HasValues("log_level", ("debug", "info")),
        When(concrete_environment(excluding="build"),
             Nested("database", HasKeys("adapter", "password"))),
    )
    Validator(node, "production", rules=RULES)

Public API
----------
Validator, HasKeys, HasValues, AreBooleans, IsNotEmpty, Nested, When,
concrete_environment, node_flag
"""
from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol

from .exceptions import ValidationFailure
from .node import Node


class Rule(Protocol):
    """Anything with a ``check(validator)`` method can appear in a rule set."""

    def check(self, validator: Validator) -> None:
        ...


class Validator:
    """
    Walks *node* against *rules*.

    Args:
        node: The tree (or sub-tree) being validated.
        environment: Environment name, or ``None`` for early configuration.
        path: Key path of *node* inside the root tree; prefixes error
            messages.
        rules: Ordered rule set.  All rules run on construction.

    Raises:
        ValidationFailure: On the first violated rule.
    """

    def __init__(
        self,
        node: Node,
        environment: str | None,
        path: Sequence[str] = (),
        rules: Sequence[Rule] = (),
    ) -> None:
        self.node = node
        self.environment = environment
        self.path = tuple(path)
        self.rules = tuple(rules)
        self.validate()

    @property
    def early(self) -> bool:
        """``True`` when validating configuration with no environment applied."""
        return not self.environment

    def validate(self) -> None:
        for rule in self.rules:
            rule.check(self)

    def value_of(self, key: str) -> Any:
        """Value at *key*, or ``None`` when the key is not defined."""
        return self.node[key] if self.node.has_key(key) else None

    def fail(self, key: str, problem: str) -> None:
        key_path = ".".join(self.path + (key,))
        raise ValidationFailure(key_path, self.environment, problem)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

class HasKeys:
    """Every listed key must be defined (a ``None`` value is fine)."""

    def __init__(self, *keys: str) -> None:
        self.keys = keys

    def check(self, validator: Validator) -> None:
        for key in self.keys:
            if not validator.node.has_key(key):
                validator.fail(key, "is required")


class HasValues:
    """The value at *key* must be one of *values* (or ``None`` with *allow_nil*)."""

    def __init__(self, key: str, values: Sequence[Any], allow_nil: bool = False) -> None:
        self.key = key
        self.values = tuple(values)
        self.allow_nil = allow_nil

    def check(self, validator: Validator) -> None:
        allowed = list(self.values) + ([None] if self.allow_nil else [])
        value = validator.value_of(self.key)
        # ``1 == True`` in Python, so compare type as well as value.
        if any(value == a and type(value) is type(a) for a in allowed):
            return
        validator.fail(
            self.key, f"should be one of {allowed!r}, but was {value!r}"
        )


class AreBooleans:
    """Every listed key must hold ``True`` or ``False``."""

    def __init__(self, *keys: str) -> None:
        self.rules = tuple(HasValues(key, (True, False)) for key in keys)

    def check(self, validator: Validator) -> None:
        for rule in self.rules:
            rule.check(validator)


class IsNotEmpty:
    """The value at *key* must be a non-empty string, list or mapping."""

    def __init__(self, key: str) -> None:
        self.key = key

    def check(self, validator: Validator) -> None:
        value = validator.value_of(self.key)
        if value is None:
            validator.fail(self.key, "must not be empty")
        if not isinstance(value, (str, list, tuple, Node)):
            validator.fail(self.key, f"must be a string, list or mapping, but was {value!r}")
        if len(value) == 0:
            validator.fail(self.key, "must not be empty")


class Nested:
    """
    Validate the sub-tree at *key* with its own rule set.

    A missing or empty sub-tree is treated as an empty Node, so only rules
    that require keys inside it fail.
    """

    def __init__(self, key: str, *rules: Rule) -> None:
        self.key = key
        self.rules = rules

    def check(self, validator: Validator) -> None:
        sub_node = validator.value_of(self.key) or Node()
        if not isinstance(sub_node, Node):
            validator.fail(self.key, "must be a mapping")
        Validator(
            sub_node,
            validator.environment,
            validator.path + (self.key,),
            self.rules,
        )


class When:
    """Run *rules* only if ``condition(validator)`` is true."""

    def __init__(self, condition: Callable[[Validator], bool], *rules: Rule) -> None:
        self.condition = condition
        self.rules = rules

    def check(self, validator: Validator) -> None:
        if self.condition(validator):
            for rule in self.rules:
                rule.check(validator)


# ---------------------------------------------------------------------------
# Conditions
# ---------------------------------------------------------------------------

def concrete_environment(excluding: str | None = None) -> Callable[[Validator], bool]:
    """Condition: an environment is set and it is not *excluding*."""

    def condition(validator: Validator) -> bool:
        return not validator.early and validator.environment != excluding

    return condition


def node_flag(key: str, expected: bool = True) -> Callable[[Validator], bool]:
    """Condition: the truth of the value at *key* equals *expected*."""

    def condition(validator: Validator) -> bool:
        return bool(validator.value_of(key)) is expected

    return condition
