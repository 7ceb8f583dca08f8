"""
Property descriptor reduction.

Every property node of a schema reduces to exactly one of five kinds for
comparison purposes.  ``reduce_descriptor`` is total: a node that matches
none of the specific kinds becomes ``PrimitiveDescriptor("any")``.

Precedence, first match wins:

1. ``const`` key present (``null`` is a valid constant)
2. ``enum`` present and not ``null``
3. non-empty ``$ref``
4. ``type == "array"`` (items reduced recursively, ``any`` when absent)
5. primitive ``type`` (``any`` when absent)

Two descriptors are type-equal iff their ``describe()`` strings are equal.

Usage::

    from forge_contracts.descriptors import reduce_descriptor

    reduce_descriptor({"type": "array", "items": {"type": "string"}}).describe()
    # "array<string>"
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union

from forge_contracts.types import DescriptorKind

ANY = "any"


def _compact(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True)
class ConstDescriptor:
    value: Any
    kind = DescriptorKind.CONST

    def describe(self) -> str:
        return f"const({_compact(self.value)})"


@dataclass(frozen=True)
class EnumDescriptor:
    values: tuple[Any, ...]
    kind = DescriptorKind.ENUM

    def describe(self) -> str:
        return f"enum({_compact(list(self.values))})"


@dataclass(frozen=True)
class RefDescriptor:
    target: str
    kind = DescriptorKind.REF

    def describe(self) -> str:
        return f"$ref({self.target})"


@dataclass(frozen=True)
class ArrayDescriptor:
    items: "PropertyDescriptor"
    kind = DescriptorKind.ARRAY

    def describe(self) -> str:
        return f"array<{self.items.describe()}>"


@dataclass(frozen=True)
class PrimitiveDescriptor:
    type_name: str = ANY
    kind = DescriptorKind.PRIMITIVE

    def describe(self) -> str:
        return self.type_name


PropertyDescriptor = Union[
    ConstDescriptor,
    EnumDescriptor,
    RefDescriptor,
    ArrayDescriptor,
    PrimitiveDescriptor,
]


def reduce_descriptor(node: Any) -> PropertyDescriptor:
    """Reduce a schema property node to its descriptor kind."""
    if not isinstance(node, dict):
        # Boolean schemas and malformed nodes carry no comparable shape
        return PrimitiveDescriptor(ANY)

    if "const" in node:
        return ConstDescriptor(node["const"])

    enum = node.get("enum")
    if enum is not None:
        values = tuple(enum) if isinstance(enum, list) else (enum,)
        return EnumDescriptor(values)

    ref = node.get("$ref")
    if isinstance(ref, str) and ref:
        return RefDescriptor(ref)

    type_value = node.get("type")
    if type_value == "array":
        items = node.get("items")
        return ArrayDescriptor(
            reduce_descriptor(items) if items is not None else PrimitiveDescriptor(ANY)
        )

    if isinstance(type_value, str) and type_value:
        return PrimitiveDescriptor(type_value)
    if isinstance(type_value, list) and type_value:
        return PrimitiveDescriptor(_compact(type_value))
    return PrimitiveDescriptor(ANY)


def describe_type(node: Any) -> str:
    """Kind-string of a property node (shortcut for ``reduce_descriptor``)."""
    return reduce_descriptor(node).describe()
