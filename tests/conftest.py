"""
Pytest configuration and shared fixtures for all firewalker tests.

The graph fixtures model a small configuration:

    provider "aws" {}

    variable "region" {}
    variable "ami" { default = "ami-123" }
    variable "instance_count" { default = 2 }
    variable "amis" { default = {} }

    locals { prefix = "web" }
    module "vpc" { source = "./vpc" }

    data "aws_ami" "ubuntu" {}
    resource "aws_instance" "web" {}
    resource "google_compute_instance" "vm" {}   # no google provider
"""

import sys
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from firewalker.frontend.variables import ResourceMode
from firewalker.ir.graph import (
    Graph, LocalNode, ModuleNode, ProviderNode, ResourceConfig, ResourceNode, VariableNode,
)
from firewalker.ir.nodes import BoundLiteral, BoundMapProperty
from firewalker.passes.binder import PropertyBinder
from firewalker.shared.schema import Schemas
from firewalker.shared.source_location import SourceLocation
from firewalker.shared.types import NUMBER, STRING


AWS_SCHEMAS = {
    "aws_instance": {
        "properties": {
            "ami": {"type": "string"},
            "instance_type": {"type": "string"},
            "tags": {"type": "map"},
            "security_groups": {"type": "list", "elem": {"type": "string"}},
            "ebs_block_device": {
                "type": "list",
                "elem": {
                    "properties": {
                        "device_name": {"type": "string"},
                        "volume_size": {"type": "number"},
                    },
                },
            },
        },
    },
    "aws_ami": {
        "properties": {
            "id": {"type": "string"},
            "name": {"type": "string"},
        },
    },
}


# =============================================================================
# Graph fixtures (function-scoped: binding attaches providers to resources)
# =============================================================================

@pytest.fixture
def aws_provider():
    return ProviderNode(
        "aws",
        resource_schemas={t: Schemas.from_json(s) for t, s in AWS_SCHEMAS.items()},
    )


@pytest.fixture
def graph(aws_provider):
    """Symbol environment for the configuration in the module docstring."""
    g = Graph()
    g.add_provider(aws_provider)

    g.add_variable(VariableNode("region"))
    g.add_variable(VariableNode("ami", BoundLiteral(STRING, "ami-123")))
    g.add_variable(VariableNode("instance_count", BoundLiteral(NUMBER, 2)))
    g.add_variable(VariableNode("amis", BoundMapProperty({})))

    g.add_local(LocalNode("prefix", BoundLiteral(STRING, "web")))
    g.add_module(ModuleNode("vpc", source="./vpc"))

    g.add_resource(ResourceNode(ResourceConfig("aws_ami", "ubuntu", mode=ResourceMode.DATA)))
    g.add_resource(ResourceNode(ResourceConfig("aws_instance", "web")))
    g.add_resource(ResourceNode(ResourceConfig("google_compute_instance", "vm")))
    return g


@pytest.fixture
def binder(graph):
    """Binder with no count index in scope."""
    return PropertyBinder(graph)


@pytest.fixture
def counted_binder(graph):
    """Binder for the properties of a resource with `count` set."""
    return PropertyBinder(graph, has_count_index=True)


@pytest.fixture
def location():
    return SourceLocation(file="main.tf", line=12, column=14, end_line=12, end_column=33)


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
