"""
core/data/query/filters.py - Filter predicates over descriptor attributes

A FilterSet is an ordered collection of FilterPredicate. A descriptor matches
when, for every distinct attribute name in the set, at least one predicate on
that name accepts the attribute value (OR within a name, AND across names).
An empty FilterSet matches every descriptor.

Usage:
    from core.data.query.filters import FilterSet

    filters = FilterSet.from_expressions(["flavor=gpu,cpu", "category=compute"])
    filters.validate("images")
    matched = [image for image in images if filters.matches(image)]

Expression syntax:
    name=v1,v2    exact match against any of the values
    name~pat      glob match (fnmatch, case sensitive)
    name~=regex   regular expression (full match)
"""

from __future__ import annotations

import fnmatch
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Any

from core.data.inventory.types import ResourceDescriptor, get_descriptor_class
from core.exceptions import InvalidFilterError


class MatchMode(str, Enum):
    """How a predicate compares attribute values"""

    EXACT = "exact"
    GLOB = "glob"
    REGEX = "regex"

    @classmethod
    def parse(cls, value: str | MatchMode, attribute: str = "") -> MatchMode:
        if isinstance(value, MatchMode):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise InvalidFilterError(attribute, f"unknown match mode '{value}' (expected {valid})") from None


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


def format_attribute_value(value: Any) -> str:
    """String form used when matching attribute values"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        text = repr(value)
        # integral floats compare equal to their int form
        return text[:-2] if value.is_integer() and text.endswith(".0") else text
    return str(value)


@dataclass(frozen=True)
class FilterPredicate:
    """One named constraint with its acceptable values"""

    name: str
    values: frozenset[str]
    match_mode: MatchMode = MatchMode.EXACT

    def __post_init__(self):
        if not self.name:
            raise InvalidFilterError("", "filter name must not be empty")
        if isinstance(self.values, str):
            object.__setattr__(self, "values", frozenset([self.values]))
        else:
            object.__setattr__(self, "values", frozenset(format_attribute_value(v) for v in self.values))
        if not self.values:
            raise InvalidFilterError(self.name, "at least one value is required")
        object.__setattr__(self, "match_mode", MatchMode.parse(self.match_mode, self.name))

        if self.match_mode is MatchMode.REGEX:
            for pattern in self.values:
                try:
                    _compile(pattern)
                except re.error as e:
                    raise InvalidFilterError(self.name, f"invalid regular expression {pattern!r}: {e}") from e

    def match(self, attribute_name: str, attribute_value: Any) -> bool:
        """Check one attribute against this predicate

        Vacuously true for attributes other than the predicate's own.
        """
        if attribute_name != self.name:
            return True

        text = format_attribute_value(attribute_value)
        if self.match_mode is MatchMode.EXACT:
            return text in self.values
        if self.match_mode is MatchMode.GLOB:
            return any(fnmatch.fnmatchcase(text, pattern) for pattern in self.values)
        return any(_compile(pattern).fullmatch(text) is not None for pattern in self.values)

    def __str__(self) -> str:
        op = {MatchMode.EXACT: "=", MatchMode.GLOB: "~", MatchMode.REGEX: "~="}[self.match_mode]
        return f"{self.name}{op}{','.join(sorted(self.values))}"


@dataclass(frozen=True)
class FilterSet:
    """Ordered predicates combined OR-within-name, AND-across-names"""

    predicates: tuple[FilterPredicate, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "predicates", tuple(self.predicates))

    @property
    def is_empty(self) -> bool:
        return not self.predicates

    def names(self) -> list[str]:
        """Distinct attribute names in first-appearance order"""
        return list(dict.fromkeys(p.name for p in self.predicates))

    def grouped(self) -> dict[str, list[FilterPredicate]]:
        groups: dict[str, list[FilterPredicate]] = {}
        for predicate in self.predicates:
            groups.setdefault(predicate.name, []).append(predicate)
        return groups

    def validate(self, kind: str) -> None:
        """Reject attribute names the kind does not define

        Raises:
            UnknownResourceKindError: the kind is not registered
            InvalidFilterError: naming the first unknown attribute
        """
        known = get_descriptor_class(kind).attribute_names()
        for name in self.names():
            if name not in known:
                raise InvalidFilterError(
                    name,
                    f"not an attribute (expected one of: {', '.join(known)})",
                    kind=kind,
                )

    def matches(self, descriptor: ResourceDescriptor) -> bool:
        # no predicates: every descriptor matches
        if not self.predicates:
            return True

        attributes = descriptor.attributes()
        for name, group in self.grouped().items():
            if name not in attributes:
                raise InvalidFilterError(name, "not an attribute", kind=descriptor.KIND)
            value = attributes[name]
            if not any(predicate.match(name, value) for predicate in group):
                return False
        return True

    def __len__(self) -> int:
        return len(self.predicates)

    def __str__(self) -> str:
        return " ".join(str(p) for p in self.predicates) or "<all>"

    # =========================================================================
    # Parsing
    # =========================================================================

    @classmethod
    def from_blocks(cls, blocks: Iterable[Mapping[str, Any]]) -> FilterSet:
        """Build from filter blocks: {"name": ..., "values": [...], "match": ...}"""
        predicates = []
        for block in blocks:
            if not isinstance(block, Mapping):
                raise InvalidFilterError("", f"filter block must be a mapping, got {type(block).__name__}")
            name = str(block.get("name") or "")
            values = block.get("values")
            if isinstance(values, Mapping):
                raise InvalidFilterError(name, "values must be a value or a list of values, not a mapping")
            if values is None:
                values = []
            elif isinstance(values, (str, int, float)):
                values = [values]
            predicates.append(
                FilterPredicate(
                    name=name,
                    values=frozenset(format_attribute_value(v) for v in values),
                    match_mode=MatchMode.parse(block.get("match") or MatchMode.EXACT, name),
                )
            )
        return cls(tuple(predicates))

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> FilterSet:
        """Build exact predicates from query parameters {name: value | [values]}"""
        return cls.from_blocks({"name": name, "values": values} for name, values in params.items())

    @classmethod
    def from_expressions(cls, expressions: Iterable[str]) -> FilterSet:
        """Build from CLI expressions (name=v1,v2 / name~glob / name~=regex)"""
        return cls(tuple(parse_expression(expr) for expr in expressions))


def parse_expression(expression: str) -> FilterPredicate:
    """Parse one ``name<op>values`` expression

    Raises:
        InvalidFilterError: no operator, empty name or no values
    """
    match = re.search(r"~=|~|=", expression)
    if match is None:
        raise InvalidFilterError(expression, "expected name=value, name~glob or name~=regex")

    name = expression[: match.start()].strip()
    raw = expression[match.end() :]
    op = match.group(0)

    if op == "~=":
        # a regex may itself contain commas
        values = [raw] if raw else []
        mode = MatchMode.REGEX
    else:
        values = [v.strip() for v in raw.split(",") if v.strip()]
        mode = MatchMode.GLOB if op == "~" else MatchMode.EXACT

    return FilterPredicate(name=name, values=frozenset(values), match_mode=mode)


def coerce_filter_set(filters: Any) -> FilterSet:
    """Accept None, a FilterSet, a params mapping, or blocks / expressions"""
    if filters is None:
        return FilterSet()
    if isinstance(filters, FilterSet):
        return filters
    if isinstance(filters, Mapping):
        return FilterSet.from_params(filters)
    if isinstance(filters, str):
        return FilterSet.from_expressions([filters])

    items = list(filters)
    if all(isinstance(item, str) for item in items):
        return FilterSet.from_expressions(items)
    return FilterSet.from_blocks(items)
