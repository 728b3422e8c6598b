"""
Resource Schemas

A Schemas value describes one level of a resource's property tree: its
declared type, its nested properties (for object blocks) and its element
schema (for lists). Property paths are resolved one element at a time with
property_schemas(); unknown names resolve to the unknown schema rather than
failing, so a walk over an undeclared path yields an unknown type.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .errors import MalformedInputError
from .types import Type, TypeKind, UNKNOWN, BOOL, NUMBER, STRING, MAP


_PRIMITIVE_TYPES = {
    "bool": BOOL,
    "number": NUMBER,
    "int": NUMBER,
    "float": NUMBER,
    "string": STRING,
    "map": MAP,
}


@dataclass
class Schemas:
    """Schema for a resource or one of its properties."""
    declared_type: Type = UNKNOWN
    properties: Dict[str, "Schemas"] = field(default_factory=dict)
    elem: Optional["Schemas"] = None

    @property
    def type(self) -> Type:
        if self.elem is not None:
            return self.elem.type.list_of()
        return self.declared_type

    def property_schemas(self, name: str) -> "Schemas":
        """Schema of the named property; the unknown schema when it is not declared."""
        if not name:
            return UNKNOWN_SCHEMAS
        if self.elem is None:
            return self.properties.get(name, UNKNOWN_SCHEMAS)
        # Index segments ("0", "*") select the element of a list, "#" is its
        # length; named attributes of a list block go through its element.
        if name == "#":
            return Schemas(declared_type=NUMBER)
        if name.isdigit() or name == "*":
            return self.elem
        return self.elem.properties.get(name, UNKNOWN_SCHEMAS)

    def element_schemas(self) -> "Schemas":
        return self.elem if self.elem is not None else UNKNOWN_SCHEMAS

    @classmethod
    def object_of(cls, **properties: "Schemas") -> "Schemas":
        return cls(declared_type=MAP, properties=dict(properties))

    @classmethod
    def list_of(cls, elem: "Schemas") -> "Schemas":
        return cls(elem=elem)

    @classmethod
    def from_json(cls, spec: Mapping[str, Any]) -> "Schemas":
        """
        Build schemas from a provider-style JSON description.

        Accepted shapes::

            {"type": "string"}
            {"type": "list", "elem": {...}}          # "set" is an alias
            {"type": "object", "properties": {...}}

        A bare object without "type" but with "properties" is treated as an
        object block, which is how resource schemas are usually written.
        """
        kind = spec.get("type")
        if kind is None and "properties" in spec:
            kind = "object"
        if kind in ("list", "set"):
            elem = spec.get("elem")
            return cls.list_of(cls.from_json(elem) if elem is not None else UNKNOWN_SCHEMAS)
        if kind == "object":
            props = spec.get("properties") or {}
            return cls.object_of(**{name: cls.from_json(sub) for name, sub in props.items()})
        if kind is None or kind == TypeKind.UNKNOWN.value:
            return cls()
        if kind not in _PRIMITIVE_TYPES:
            raise MalformedInputError(f"unknown schema type {kind!r}")
        return cls(declared_type=_PRIMITIVE_TYPES[kind])


UNKNOWN_SCHEMAS = Schemas()
