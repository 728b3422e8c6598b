"""
Type System

The value types of bound HIL expressions. The lattice is deliberately small:
a primitive kind plus two flags, `list` and `output`. Flags rather than nested
wrappers mean list_of() and output_of() are idempotent and commute, so a
splatted resource attribute is the same type whichever wrapper is applied
first.
"""

from dataclasses import dataclass, replace
from enum import Enum


class TypeKind(Enum):
    """Primitive type kind."""
    UNKNOWN = "unknown"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    MAP = "map"


@dataclass(frozen=True)
class Type:
    """
    Type of a bound expression.

    Immutable; equality is structural. `is_list` marks a homogeneous
    sequence of the element type, `is_output` marks a value that is produced
    asynchronously by a resource or module.
    """
    kind: TypeKind
    list: bool = False
    output: bool = False

    def is_list(self) -> bool:
        return self.list

    def is_output(self) -> bool:
        return self.output

    def element_type(self) -> "Type":
        """Element type of a list type; unknown for anything that is not a list."""
        if not self.list:
            return UNKNOWN
        return replace(self, list=False)

    def list_of(self) -> "Type":
        return replace(self, list=True)

    def output_of(self) -> "Type":
        return replace(self, output=True)

    def __str__(self) -> str:
        text = self.kind.value
        if self.list:
            text = f"list<{text}>"
        if self.output:
            text = f"output<{text}>"
        return text


UNKNOWN = Type(TypeKind.UNKNOWN)
BOOL = Type(TypeKind.BOOL)
NUMBER = Type(TypeKind.NUMBER)
STRING = Type(TypeKind.STRING)
MAP = Type(TypeKind.MAP)
