"""
Interpolated Variable References

Interprets the raw text of a HIL variable access (`var.region`,
`aws_instance.web.*.id`, `count.index`, ...) as one of the Terraform
reference kinds. The binder decides, per kind, which graph node the
reference resolves to.

Classification follows Terraform 0.11: a reference without a dot is a simple
variable; otherwise the first segment selects the kind, and anything not
claimed by a keyword prefix is a managed resource reference.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import List, Optional, Union

from lark import Lark, Transformer, Token
from lark.exceptions import UnexpectedInput

from ..shared.errors import MalformedInputError
from ..shared.source_location import SourceLocation
from ..utils.config import (
    VARIABLE_GRAMMAR_FILE, REFERENCE_SEPARATOR, SPLAT_MARKER, COUNT_INDEX_FIELD, NO_INDEX,
    DATA_RESOURCE_PREFIX,
)

logger = logging.getLogger(__name__)


class CountValueType(Enum):
    INVALID = "invalid"
    INDEX = "index"


class ResourceMode(Enum):
    MANAGED = "managed"
    DATA = "data"


@dataclass(frozen=True)
class CountVariable:
    """`count.FIELD`; only `count.index` is meaningful."""
    type: CountValueType
    key: str

    def full_key(self) -> str:
        return self.key


@dataclass(frozen=True)
class PathVariable:
    """`path.cwd`, `path.module`, `path.root`"""
    field: str
    key: str

    def full_key(self) -> str:
        return self.key


@dataclass(frozen=True)
class SelfVariable:
    """`self.FIELD` inside provisioner blocks"""
    field: str
    key: str

    def full_key(self) -> str:
        return self.key


@dataclass(frozen=True)
class SimpleVariable:
    """A bare name with no dot"""
    key: str

    def full_key(self) -> str:
        return self.key


@dataclass(frozen=True)
class TerraformVariable:
    """`terraform.workspace`"""
    field: str
    key: str

    def full_key(self) -> str:
        return self.key


@dataclass(frozen=True)
class UserVariable:
    """`var.NAME`, optionally element-qualified as `var.NAME.ELEM`"""
    name: str
    elem: str
    key: str

    def full_key(self) -> str:
        return self.key


@dataclass(frozen=True)
class LocalVariable:
    """`local.NAME`"""
    name: str
    key: str

    def full_key(self) -> str:
        return self.key


@dataclass(frozen=True)
class ModuleVariable:
    """`module.NAME.FIELD`"""
    name: str
    field: str
    key: str

    def full_key(self) -> str:
        return self.key


@dataclass(frozen=True)
class ResourceVariable:
    """
    `TYPE.NAME.FIELD` or `data.TYPE.NAME.FIELD`.

    `multi` is set for splats (`TYPE.NAME.*.FIELD`, index NO_INDEX) and for
    explicit indexes (`TYPE.NAME.2.FIELD`, index 2).
    """
    mode: ResourceMode
    type: str
    name: str
    field: str
    multi: bool
    index: int
    key: str

    def full_key(self) -> str:
        return self.key

    def resource_id(self) -> str:
        if self.mode is ResourceMode.DATA:
            return f"{DATA_RESOURCE_PREFIX}.{self.type}.{self.name}"
        return f"{self.type}.{self.name}"

    def is_splat(self) -> bool:
        return self.multi and self.index == NO_INDEX


InterpolatedVariable = Union[
    CountVariable, PathVariable, SelfVariable, SimpleVariable, TerraformVariable,
    UserVariable, LocalVariable, ModuleVariable, ResourceVariable,
]


class _ResourceField:
    __slots__ = ('field', 'multi', 'index')

    def __init__(self, field: str, multi: bool = False, index: int = NO_INDEX):
        self.field = field
        self.multi = multi
        self.index = index


class _VariableTransformer(Transformer):
    """Builds InterpolatedVariable values from the reference parse tree."""

    def __init__(self, key: str):
        super().__init__()
        self.key = key

    def field(self, segments: List[Token]) -> str:
        return REFERENCE_SEPARATOR.join(str(s) for s in segments)

    def splat_field(self, children) -> _ResourceField:
        if len(children) == 1:
            # `TYPE.NAME.*` names an attribute called "*"; it is not a splat.
            return _ResourceField(SPLAT_MARKER)
        return _ResourceField(children[1], multi=True)

    def index_field(self, children) -> _ResourceField:
        if len(children) == 1:
            return _ResourceField(str(children[0]))
        return _ResourceField(children[1], multi=True, index=int(children[0]))

    def plain_field(self, children) -> _ResourceField:
        return _ResourceField(REFERENCE_SEPARATOR.join(str(c) for c in children))

    def count_ref(self, children) -> CountVariable:
        kind = CountValueType.INDEX if children[0] == COUNT_INDEX_FIELD else CountValueType.INVALID
        return CountVariable(kind, self.key)

    def path_ref(self, children) -> PathVariable:
        return PathVariable(children[0], self.key)

    def self_ref(self, children) -> SelfVariable:
        return SelfVariable(children[0], self.key)

    def terraform_ref(self, children) -> TerraformVariable:
        return TerraformVariable(children[0], self.key)

    def user_ref(self, children) -> UserVariable:
        elem = children[1] if len(children) > 1 else ""
        return UserVariable(str(children[0]), elem, self.key)

    def local_ref(self, children) -> LocalVariable:
        return LocalVariable(str(children[0]), self.key)

    def module_ref(self, children) -> ModuleVariable:
        return ModuleVariable(str(children[0]), children[1], self.key)

    def data_ref(self, children) -> ResourceVariable:
        return self._resource(ResourceMode.DATA, children)

    def resource_ref(self, children) -> ResourceVariable:
        return self._resource(ResourceMode.MANAGED, children)

    def _resource(self, mode: ResourceMode, children) -> ResourceVariable:
        type_name, name, rf = children
        return ResourceVariable(
            mode=mode,
            type=str(type_name),
            name=str(name),
            field=rf.field,
            multi=rf.multi,
            index=rf.index,
            key=self.key,
        )


@lru_cache(maxsize=None)
def _reference_parser() -> Lark:
    return Lark.open(str(VARIABLE_GRAMMAR_FILE), start='start', parser='lalr')


def parse_variable(text: str, location: Optional[SourceLocation] = None) -> InterpolatedVariable:
    """
    Interpret raw reference text as an interpolated variable.

    Raises MalformedInputError when the text is not a valid reference.
    """
    if REFERENCE_SEPARATOR not in text:
        if not text:
            raise MalformedInputError("empty variable reference", location)
        return SimpleVariable(text)

    try:
        tree = _reference_parser().parse(text)
    except UnexpectedInput as e:
        raise MalformedInputError(
            f"invalid variable reference {text!r}", location,
            note=f"unexpected input at column {e.column}",
        ) from e

    variable = _VariableTransformer(text).transform(tree)
    logger.debug(f"parsed reference {text!r} as {type(variable).__name__}")
    return variable
