#!/usr/bin/env python3
"""
Tests for the expression binder: literal and call typing, conditional and
index inference, output projection and variable-access resolution.
"""

import pytest
from firewalker.frontend.variables import ResourceVariable, UserVariable
from firewalker.ir.nodes import (
    BoundArithmetic, BoundCall, BoundConditional, BoundIndex, BoundListProperty, BoundLiteral,
    BoundMapProperty, BoundOutput, BoundVariableAccess,
)
from firewalker.passes.binder import PropertyBinder
from firewalker.shared.errors import (
    MalformedInputError, ScopeError, UnresolvedReferenceError, UnsupportedConstructError,
)
from firewalker.shared.nodes import (
    ASTNode, Arithmetic, ArithmeticOp, Call, Conditional, Index, LiteralNode, LiteralType, Output,
    VariableAccess,
)
from firewalker.shared.types import UNKNOWN, BOOL, NUMBER, STRING, MAP


def lit(value):
    if isinstance(value, bool):
        return LiteralNode(value, LiteralType.BOOL)
    if isinstance(value, int):
        return LiteralNode(value, LiteralType.INT)
    if isinstance(value, float):
        return LiteralNode(value, LiteralType.FLOAT)
    return LiteralNode(value, LiteralType.STRING)


def var(name, location=None):
    return VariableAccess(name, location)


class TestLiterals:

    @pytest.mark.parametrize("value,expected", [
        (True, BOOL),
        (False, BOOL),
        (42, NUMBER),
        (1.5, NUMBER),
        ("ami-123", STRING),
    ])
    def test_literal_type_and_value(self, binder, value, expected):
        node = lit(value)
        bound = binder.bind_expr(node)
        assert isinstance(bound, BoundLiteral)
        assert bound.type == expected
        assert bound.value == value
        assert bound.hil_node is node

    @pytest.mark.parametrize("typex", [LiteralType.LIST, LiteralType.MAP, LiteralType.ANY,
                                       LiteralType.UNKNOWN])
    def test_unsupported_literal_type(self, binder, typex):
        with pytest.raises(MalformedInputError, match="unexpected literal type"):
            binder.bind_expr(LiteralNode([], typex))


class TestCalls:

    @pytest.mark.parametrize("func", ["base64decode", "base64encode", "chomp", "file", "format"])
    def test_string_functions(self, binder, func):
        bound = binder.bind_expr(Call(func, [lit("x")]))
        assert isinstance(bound, BoundCall)
        assert bound.func == func
        assert bound.type == STRING

    def test_list(self, binder):
        assert binder.bind_expr(Call("list", [lit("a"), lit(1)])).type == UNKNOWN.list_of()

    def test_lookup(self, binder):
        assert binder.bind_expr(Call("lookup", [var("var.amis"), lit("k")])).type == UNKNOWN

    def test_split(self, binder):
        assert binder.bind_expr(Call("split", [lit(","), lit("a,b")])).type == STRING.list_of()

    @pytest.mark.parametrize("n", [0, 2, 4])
    def test_map_with_even_arguments(self, binder, n):
        args = [lit(f"v{i}") for i in range(n)]
        bound = binder.bind_expr(Call("map", args))
        assert bound.type == MAP
        assert len(bound.args) == n

    @pytest.mark.parametrize("n", [1, 3])
    def test_map_with_odd_arguments(self, binder, n):
        args = [lit(f"v{i}") for i in range(n)]
        with pytest.raises(MalformedInputError, match='"map" must be even'):
            binder.bind_expr(Call("map", args))

    def test_element_of_list(self, binder):
        split = Call("split", [lit(","), lit("a,b")])
        assert binder.bind_expr(Call("element", [split, lit(0)])).type == STRING

    def test_element_of_non_list(self, binder):
        assert binder.bind_expr(Call("element", [lit("a"), lit(0)])).type == UNKNOWN

    def test_element_without_arguments(self, binder):
        assert binder.bind_expr(Call("element", [])).type == UNKNOWN

    def test_unknown_function(self, binder, location):
        with pytest.raises(UnsupportedConstructError, match="function not supported: upper") as e:
            binder.bind_expr(Call("upper", [lit("a")], location))
        assert e.value.location == location

    def test_argument_errors_fail_the_call(self, binder):
        # The argument error wins over the unknown function name.
        with pytest.raises(UnresolvedReferenceError):
            binder.bind_expr(Call("upper", [var("var.missing")]))

    def test_arguments_keep_order(self, binder):
        bound = binder.bind_expr(Call("format", [lit("%s-%s"), lit("a"), lit("b")]))
        assert [a.value for a in bound.args] == ["%s-%s", "a", "b"]


class TestConditionals:

    def test_matching_branches(self, binder):
        bound = binder.bind_expr(Conditional(lit(True), lit("a"), lit("b")))
        assert isinstance(bound, BoundConditional)
        assert bound.type == STRING

    def test_mismatched_branches(self, binder):
        assert binder.bind_expr(Conditional(lit(True), lit(1), lit("b"))).type == UNKNOWN

    def test_unknown_branches(self, binder):
        lookup = Call("lookup", [var("var.amis"), lit("k")])
        assert binder.bind_expr(Conditional(lit(True), lookup, lookup)).type == UNKNOWN

    def test_list_branches(self, binder):
        split = Call("split", [lit(","), lit("a,b")])
        assert binder.bind_expr(Conditional(lit(False), split, split)).type == STRING.list_of()

    def test_condition_type_is_not_checked(self, binder):
        bound = binder.bind_expr(Conditional(lit("yes"), lit(1), lit(2)))
        assert bound.type == NUMBER


class TestIndex:

    def test_index_into_list(self, binder):
        split = Call("split", [lit(","), lit("a,b")])
        bound = binder.bind_expr(Index(split, lit(0)))
        assert isinstance(bound, BoundIndex)
        assert bound.type == STRING

    def test_index_into_non_list(self, binder):
        assert binder.bind_expr(Index(var("var.amis"), lit("us"))).type == UNKNOWN

    def test_index_into_splat(self, binder):
        bound = binder.bind_expr(Index(var("aws_instance.web.*.ami"), lit(0)))
        assert bound.type == STRING.output_of()


class TestOutputAndArithmetic:

    def test_single_element_output_is_its_element(self, binder):
        inner = lit("ami-123")
        bound = binder.bind_expr(Output([inner]))
        assert isinstance(bound, BoundLiteral)
        assert bound.hil_node is inner

    def test_empty_output(self, binder):
        bound = binder.bind_expr(Output([]))
        assert isinstance(bound, BoundOutput)
        assert bound.exprs == []
        assert bound.type == STRING

    def test_multi_element_output(self, binder):
        bound = binder.bind_expr(Output([lit("ami-"), var("var.region")]))
        assert isinstance(bound, BoundOutput)
        assert bound.type == STRING
        assert [type(e) for e in bound.exprs] == [BoundLiteral, BoundVariableAccess]

    def test_arithmetic(self, binder):
        node = Arithmetic(ArithmeticOp.ADD, [lit(1), lit(2), var("count.index")])
        bound = PropertyBinder(binder.graph, has_count_index=True).bind_expr(node)
        assert isinstance(bound, BoundArithmetic)
        assert bound.type == UNKNOWN
        assert bound.op is ArithmeticOp.ADD
        assert len(bound.exprs) == 3


class TestCountAccess:

    def test_count_index_in_scope(self, counted_binder):
        bound = counted_binder.bind_expr(var("count.index"))
        assert isinstance(bound, BoundVariableAccess)
        assert bound.type == NUMBER
        assert bound.il_node is None

    def test_count_index_out_of_scope(self, binder, location):
        with pytest.raises(ScopeError, match="no count index in scope") as e:
            binder.bind_expr(var("count.index", location))
        assert e.value.location == location

    def test_other_count_field(self, counted_binder):
        with pytest.raises(UnsupportedConstructError, match="unsupported count variable count.total"):
            counted_binder.bind_expr(var("count.total"))


class TestUnsupportedAccess:

    @pytest.mark.parametrize("name,message", [
        ("path.module", "NYI: path variables"),
        ("self.private_ip", "NYI: self variables"),
        ("terraform.workspace", "NYI: terraform variables"),
        ("foo", "NYI: simple variables"),
        ("var.amis.us", "NYI: user variable elements"),
    ])
    def test_not_implemented(self, binder, name, message):
        with pytest.raises(UnsupportedConstructError, match=message):
            binder.bind_expr(var(name))

    def test_malformed_reference(self, binder):
        with pytest.raises(MalformedInputError):
            binder.bind_expr(var("aws_instance.web"))


class TestLocalAndModuleAccess:

    def test_local(self, binder, graph):
        bound = binder.bind_expr(var("local.prefix"))
        assert bound.type == UNKNOWN.output_of()
        assert bound.il_node is graph.locals["prefix"]

    def test_module(self, binder, graph):
        bound = binder.bind_expr(var("module.vpc.subnet_id"))
        assert bound.type == UNKNOWN.output_of()
        assert bound.il_node is graph.modules["vpc"]

    def test_unknown_local(self, binder):
        with pytest.raises(UnresolvedReferenceError, match="unknown local nope"):
            binder.bind_expr(var("local.nope"))

    def test_unknown_module(self, binder):
        with pytest.raises(UnresolvedReferenceError, match="unknown module nope"):
            binder.bind_expr(var("module.nope.id"))


class TestUserVariableAccess:

    def test_without_default(self, binder, graph):
        bound = binder.bind_expr(var("var.region"))
        assert bound.type == STRING
        assert bound.il_node is graph.variables["region"]
        assert isinstance(bound.tf_var, UserVariable)

    def test_string_default(self, binder):
        assert binder.bind_expr(var("var.ami")).type == STRING

    def test_number_default(self, binder):
        assert binder.bind_expr(var("var.instance_count")).type == UNKNOWN

    def test_map_default(self, binder):
        assert binder.bind_expr(var("var.amis")).type == UNKNOWN

    def test_unknown_variable(self, binder):
        with pytest.raises(UnresolvedReferenceError, match="unknown variable nope"):
            binder.bind_expr(var("var.nope"))


class TestResourceAccess:

    def test_attribute(self, binder, graph):
        bound = binder.bind_expr(var("aws_instance.web.ami"))
        resource = graph.resources["aws_instance.web"]
        assert bound.type == STRING.output_of()
        assert bound.il_node is resource
        assert bound.elements == ["ami"]
        assert bound.schemas is resource.schemas
        assert isinstance(bound.tf_var, ResourceVariable)

    def test_binding_attaches_provider(self, binder, graph, aws_provider):
        binder.bind_expr(var("aws_instance.web.ami"))
        assert graph.resources["aws_instance.web"].provider is aws_provider

    def test_splat_attribute(self, binder):
        bound = binder.bind_expr(var("aws_instance.web.*.ami"))
        assert bound.type == STRING.output_of().list_of()
        assert bound.type == STRING.list_of().output_of()

    def test_indexed_attribute(self, binder):
        assert binder.bind_expr(var("aws_instance.web.1.ami")).type == STRING.output_of()

    def test_list_attribute(self, binder):
        bound = binder.bind_expr(var("aws_instance.web.security_groups"))
        assert bound.type == STRING.list_of().output_of()

    def test_list_count(self, binder):
        bound = binder.bind_expr(var("aws_instance.web.security_groups.#"))
        assert bound.type == NUMBER.output_of()

    def test_nested_block_attribute(self, binder):
        bound = binder.bind_expr(var("aws_instance.web.ebs_block_device.0.volume_size"))
        assert bound.type == NUMBER.output_of()
        assert bound.elements == ["ebs_block_device", "0", "volume_size"]

    def test_undeclared_attribute(self, binder):
        assert binder.bind_expr(var("aws_instance.web.nope")).type == UNKNOWN.output_of()

    def test_data_source(self, binder, graph):
        bound = binder.bind_expr(var("data.aws_ami.ubuntu.id"))
        assert bound.type == STRING.output_of()
        assert bound.il_node is graph.resources["data.aws_ami.ubuntu"]

    def test_unknown_resource(self, binder):
        with pytest.raises(UnresolvedReferenceError, match="unknown resource aws_instance.db"):
            binder.bind_expr(var("aws_instance.db.id"))

    def test_missing_provider(self, binder, location):
        with pytest.raises(UnresolvedReferenceError, match="unknown provider google") as e:
            binder.bind_expr(var("google_compute_instance.vm.name", location))
        assert e.value.location == location


class TestNameAttribute:
    """A resource type whose only declared property is `name`."""

    @pytest.fixture
    def named_binder(self, graph):
        from firewalker.ir.graph import ProviderNode, ResourceConfig, ResourceNode
        from firewalker.shared.schema import Schemas
        graph.add_provider(ProviderNode(
            "acme", resource_schemas={"acme_thing": Schemas.object_of(name=Schemas(STRING))}
        ))
        graph.add_resource(ResourceNode(ResourceConfig("acme_thing", "a")))
        return PropertyBinder(graph)

    def test_plain(self, named_binder):
        assert named_binder.bind_expr(var("acme_thing.a.name")).type == STRING.output_of()

    def test_splat(self, named_binder):
        bound = named_binder.bind_expr(var("acme_thing.a.*.name"))
        assert bound.type == STRING.output_of().list_of()


class TestUnexpectedNodes:

    def test_unknown_ast_subclass(self, binder):
        class Heredoc(ASTNode):
            __slots__ = ()

        with pytest.raises(MalformedInputError, match="unexpected HIL node type Heredoc"):
            binder.bind_expr(Heredoc())

    def test_non_ast_value(self, binder):
        with pytest.raises(MalformedInputError, match="unexpected HIL node type str"):
            binder.bind_expr("aws_instance.web.id")

    def test_bind_exprs_fails_on_first_error(self, binder):
        with pytest.raises(UnresolvedReferenceError, match="unknown variable first"):
            binder.bind_exprs([lit(1), var("var.first"), var("var.second")])


class TestBindProperty:

    def test_scalars(self, binder):
        assert binder.bind_property(True).type == BOOL
        assert binder.bind_property(3).type == NUMBER
        assert binder.bind_property(2.5).type == NUMBER
        assert binder.bind_property("t2.micro").type == STRING

    def test_list(self, binder):
        bound = binder.bind_property(["a", var("var.region")])
        assert isinstance(bound, BoundListProperty)
        assert [type(e) for e in bound.elements] == [BoundLiteral, BoundVariableAccess]

    def test_map(self, binder):
        bound = binder.bind_property({"ami": var("var.ami"), "tags": {"Name": "web"}})
        assert isinstance(bound, BoundMapProperty)
        assert list(bound.elements) == ["ami", "tags"]
        assert isinstance(bound.elements["tags"], BoundMapProperty)

    def test_empty_map(self, binder):
        bound = binder.bind_property({})
        assert isinstance(bound, BoundMapProperty)
        assert bound.elements == {}

    def test_unsupported_value(self, binder):
        with pytest.raises(MalformedInputError, match="unexpected property value of type NoneType"):
            binder.bind_property(None)


class TestProviderResolution:

    def test_explicit_provider_alias(self, graph):
        from firewalker.ir.graph import ProviderNode, ResourceConfig, ResourceNode
        west = graph.add_provider(ProviderNode("aws", alias="west"))
        resource = graph.add_resource(
            ResourceNode(ResourceConfig("aws_instance", "replica", provider="aws.west"))
        )
        graph.ensure_provider(resource)
        assert resource.provider is west

    def test_undeclared_resource_type_gets_unknown_schemas(self, graph):
        from firewalker.ir.graph import ResourceConfig, ResourceNode
        resource = graph.add_resource(ResourceNode(ResourceConfig("aws_s3_bucket", "logs")))
        graph.ensure_provider(resource)
        assert resource.schemas.type == UNKNOWN
        assert PropertyBinder(graph).bind_expr(var("aws_s3_bucket.logs.arn")).type == UNKNOWN.output_of()

    def test_existing_schemas_are_kept(self, graph):
        from firewalker.ir.graph import ResourceConfig, ResourceNode
        from firewalker.shared.schema import Schemas
        own = Schemas.object_of(arn=Schemas(STRING))
        resource = graph.add_resource(
            ResourceNode(ResourceConfig("aws_s3_bucket", "logs"), schemas=own)
        )
        graph.ensure_provider(resource)
        assert resource.schemas is own
