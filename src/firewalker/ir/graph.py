"""
Graph Nodes

The entities that variable accesses resolve to: providers, resources,
modules, locals and variables. The external graph builder creates them and
owns them through a Graph; bound nodes only hold references.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Union, TYPE_CHECKING

from ..shared.errors import UnresolvedReferenceError
from ..shared.schema import Schemas, UNKNOWN_SCHEMAS
from ..shared.types import Type, UNKNOWN
from ..frontend.variables import ResourceMode
from ..utils.config import DATA_RESOURCE_PREFIX, PROVIDER_NAME_SEPARATOR

if TYPE_CHECKING:
    from .nodes import BoundNode

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class ProviderNode:
    """
    A configured provider. `resource_schemas` plays the part of the schema
    provider: per resource type, the schema of that resource's properties.
    """
    name: str
    alias: str = ""
    properties: Optional["BoundNode"] = None
    resource_schemas: Dict[str, Schemas] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return f"{self.name}.{self.alias}" if self.alias else self.name

    def schemas_for(self, resource_type: str) -> Schemas:
        return self.resource_schemas.get(resource_type, UNKNOWN_SCHEMAS)


@dataclass(frozen=True)
class ResourceConfig:
    """Identity of a resource block in the configuration."""
    type: str
    name: str
    mode: ResourceMode = ResourceMode.MANAGED
    provider: str = ""  # explicit `provider = "aws.west"`, if any

    @property
    def id(self) -> str:
        if self.mode is ResourceMode.DATA:
            return f"{DATA_RESOURCE_PREFIX}.{self.type}.{self.name}"
        return f"{self.type}.{self.name}"

    def provider_key(self) -> str:
        if self.provider:
            return self.provider
        idx = self.type.find(PROVIDER_NAME_SEPARATOR)
        return self.type if idx == -1 else self.type[:idx]


@dataclass(eq=False)
class ResourceNode:
    config: ResourceConfig
    provider: Optional[ProviderNode] = None
    schemas: Optional[Schemas] = None
    count: Optional["BoundNode"] = None
    properties: Optional["BoundNode"] = None

    @property
    def id(self) -> str:
        return self.config.id

    def output_type(self) -> Type:
        sch = self.schemas if self.schemas is not None else UNKNOWN_SCHEMAS
        return sch.type.output_of()


@dataclass(eq=False)
class ModuleNode:
    """A module call; its outputs are typed later in the pipeline."""
    name: str
    source: str = ""
    properties: Optional["BoundNode"] = None

    def output_type(self) -> Type:
        return UNKNOWN.output_of()


@dataclass(eq=False)
class LocalNode:
    """A `locals` entry; its value is typed later in the pipeline."""
    name: str
    value: Optional["BoundNode"] = None

    def output_type(self) -> Type:
        return UNKNOWN.output_of()


@dataclass(eq=False)
class VariableNode:
    """An input variable, optionally with a bound default value."""
    name: str
    default_value: Optional["BoundNode"] = None


GraphNode = Union[ProviderNode, ResourceNode, ModuleNode, LocalNode, VariableNode]


@dataclass
class Graph:
    """
    Symbol environment for binding: the node tables built by the graph
    builder. Tables are keyed by provider key, resource id, and module,
    local and variable name. Binding only reads them, apart from
    ensure_provider(), which fills in a resource's provider on first use.
    """
    providers: Dict[str, ProviderNode] = field(default_factory=dict)
    resources: Dict[str, ResourceNode] = field(default_factory=dict)
    modules: Dict[str, ModuleNode] = field(default_factory=dict)
    locals: Dict[str, LocalNode] = field(default_factory=dict)
    variables: Dict[str, VariableNode] = field(default_factory=dict)

    def add_provider(self, node: ProviderNode) -> ProviderNode:
        self.providers[node.key] = node
        return node

    def add_resource(self, node: ResourceNode) -> ResourceNode:
        self.resources[node.id] = node
        return node

    def add_module(self, node: ModuleNode) -> ModuleNode:
        self.modules[node.name] = node
        return node

    def add_local(self, node: LocalNode) -> LocalNode:
        self.locals[node.name] = node
        return node

    def add_variable(self, node: VariableNode) -> VariableNode:
        self.variables[node.name] = node
        return node

    def ensure_provider(self, resource: ResourceNode) -> None:
        """
        Attach the resource's provider, and the provider's schema for the
        resource type when the resource has none yet.
        """
        if resource.provider is None:
            key = resource.config.provider_key()
            provider = self.providers.get(key)
            if provider is None:
                raise UnresolvedReferenceError(
                    f"unknown provider {key} for resource {resource.id}"
                )
            logger.debug(f"resolved provider {key} for {resource.id}")
            resource.provider = provider

        if resource.schemas is None:
            resource.schemas = resource.provider.schemas_for(resource.config.type)
