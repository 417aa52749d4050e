"""
Tests for typereflect.walker module.

Tests building descriptor trees from live classes, and the end-to-end
walk-then-render path.
"""

from typing import Annotated

import pytest

from sample_types import (
    Color,
    Counter,
    Derived,
    Named,
    Person,
    Point,
    Quitter,
    Range,
    Sealed,
    Shape,
)
from typereflect.profiles import CSharpProfile, VisualBasicProfile
from typereflect.renderer import NodeRenderer, render_tree
from typereflect.schema import (
    MemberFlags,
    MemberKind,
    ParameterFlags,
    TypeCategory,
)
from typereflect.walker import ANNOTATIONS_ATTR, TypeWalker, attributes, resolve_type

F = MemberFlags


def _member(tree, name):
    return next(m for m in tree.members if m.name == name)


@pytest.fixture
def walker():
    return TypeWalker()


@pytest.fixture
def person_tree(walker):
    return walker.walk(Person)


class TestResolveType:
    """Tests for resolve_type."""

    def test_colon_form(self):
        assert resolve_type("sample_types:Person") is Person

    def test_dotted_form(self):
        assert resolve_type("collections.OrderedDict").__name__ == "OrderedDict"

    def test_nested_qualname(self):
        assert resolve_type("typereflect.schema:TypeRef").__name__ == "TypeRef"

    def test_missing_module(self):
        with pytest.raises(ValueError, match="Could not import module"):
            resolve_type("no_such_module_here:Foo")

    def test_missing_attribute(self):
        with pytest.raises(ValueError, match="has no attribute"):
            resolve_type("sample_types:Nobody")

    def test_not_a_class(self):
        with pytest.raises(ValueError, match="is not a class"):
            resolve_type("typereflect.walker:resolve_type")

    def test_malformed(self):
        with pytest.raises(ValueError, match="Invalid type specification"):
            resolve_type("Person")


class TestAttributesDecorator:
    """Tests for the attributes decorator."""

    def test_stacked_decorators_keep_source_order(self):
        """Test that the topmost decorator's annotation comes first."""

        @attributes(Range(1, 2))
        @attributes(Range(3, 4))
        def function():
            pass

        assert getattr(function, ANNOTATIONS_ATTR) == (Range(1, 2), Range(3, 4))

    def test_subclass_does_not_inherit_annotations(self, walker):
        """Test that a class only reports annotations attached to itself."""

        class Employee(Person):
            pass

        assert walker.describe_type(Employee).annotations == []
        assert len(walker.describe_type(Person).annotations) == 1


class TestDescribeType:
    """Tests for type-level descriptions."""

    def test_plain_class(self, walker):
        """Test category, name and annotations of a plain class."""
        desc = walker.describe_type(Person)

        assert desc.full_name == "sample_types.Person"
        assert desc.name == "Person"
        assert desc.category == TypeCategory.CLASS
        assert desc.base_type is None
        assert desc.annotations[0].type.full_name == "sample_types.Obsolete"

    def test_enum(self, walker):
        desc = walker.describe_type(Color)

        assert desc.category == TypeCategory.ENUM
        assert desc.base_type.full_name == "enum.Enum"

    def test_protocol_is_interface(self, walker):
        """Test that protocols are interfaces with no base type."""
        desc = walker.describe_type(Named)

        assert desc.category == TypeCategory.INTERFACE
        assert desc.base_type is None
        assert desc.interfaces == []

    def test_frozen_dataclass_is_value_type(self, walker):
        assert walker.describe_type(Point).category == TypeCategory.VALUE_TYPE

    def test_sealed(self, walker):
        assert walker.describe_type(Sealed).is_sealed is True
        assert walker.describe_type(Person).is_sealed is False

    def test_abstract(self, walker):
        desc = walker.describe_type(Shape)

        assert desc.is_abstract is True
        assert desc.base_type.name == "ABC"

    def test_base_and_interfaces(self, walker):
        """Test that the first base is the base type and the rest interfaces."""
        desc = walker.describe_type(Derived)

        assert desc.category == TypeCategory.CLASS
        assert desc.base_type.name == "Base"
        assert [i.name for i in desc.interfaces] == ["Named"]

    def test_private_class_is_not_public(self, walker):
        class _Hidden:
            pass

        assert walker.describe_type(_Hidden).is_public is False


class TestMembers:
    """Tests for member descriptions."""

    def test_member_order(self, person_tree):
        """Test constructor, fields, properties, then methods."""
        kinds = [m.kind for m in person_tree.members]
        ordered = sorted(kinds, key=[
            MemberKind.CONSTRUCTOR, MemberKind.FIELD, MemberKind.PROPERTY, MemberKind.METHOD,
        ].index)

        assert kinds == ordered
        assert kinds[0] == MemberKind.CONSTRUCTOR

    def test_constructor_parameters(self, person_tree):
        """Test that self is skipped and defaults make parameters optional."""
        ctor = person_tree.members[0]

        assert [p.name for p in ctor.parameters] == ["name", "age"]
        assert ctor.parameters[0].parameter_type.full_name == "str"
        assert ctor.parameters[1].attributes == ParameterFlags.OPTIONAL | ParameterFlags.HAS_DEFAULT

    def test_field_names_in_definition_order(self, person_tree):
        fields = [m.name for m in person_tree.members if m.kind == MemberKind.FIELD]
        assert fields == ["MAX_AGE", "species", "age", "_nickname", "count"]

    def test_field_flags(self, person_tree):
        """Test Final, ClassVar, unannotated and underscore fields."""
        assert _member(person_tree, "MAX_AGE").flags == F.PUBLIC | F.LITERAL
        assert _member(person_tree, "species").flags == F.PUBLIC | F.STATIC
        assert _member(person_tree, "age").flags == F.PUBLIC
        assert _member(person_tree, "_nickname").flags == F.FAMILY
        assert _member(person_tree, "count").flags == F.PUBLIC | F.STATIC

    def test_annotated_field_metadata(self, person_tree):
        age = _member(person_tree, "age")

        assert age.field_type.full_name == "int"
        assert age.annotations[0].type.name == "Range"

    def test_properties(self, person_tree):
        """Test read-only and read/write properties."""
        upper = _member(person_tree, "upper_name")
        title = _member(person_tree, "title")

        assert (upper.can_read, upper.can_write) == (True, False)
        assert (title.can_read, title.can_write) == (True, True)
        assert [a.name for a in title.accessors] == ["get_title", "set_title"]
        assert upper.property_type.full_name == "str"

    def test_method_flags(self, person_tree):
        """Test instance, static and name-mangled private methods."""
        assert _member(person_tree, "get_name").flags == F.PUBLIC | F.VIRTUAL
        assert _member(person_tree, "default_age").flags == F.PUBLIC | F.STATIC
        assert _member(person_tree, "_Person__secret").flags == F.PRIVATE | F.VIRTUAL

    def test_abstract_method(self, walker):
        area = _member(walker.walk(Shape), "area")
        assert area.flags == F.PUBLIC | F.VIRTUAL | F.ABSTRACT

    def test_enum_members(self, walker):
        """Test that enum constants are literal fields of the enum type."""
        fields = [m for m in walker.walk(Color).members if m.kind == MemberKind.FIELD]

        assert [f.name for f in fields] == ["RED", "GREEN"]
        assert all(f.is_enum_member for f in fields)
        assert fields[0].flags == F.PUBLIC | F.STATIC | F.LITERAL

    def test_public_only(self):
        """Test that private and protected members are left out."""
        names = [m.name for m in TypeWalker(include_private=False).walk(Person).members]

        assert "_nickname" not in names
        assert "_Person__secret" not in names
        assert "get_name" in names

    def test_annotated_return_and_parameters(self, walker):
        """Test that Annotated metadata reaches parameters and return values."""

        class Calculator:
            def scale(self, factor: Annotated[int, Range(1, 10)]) -> Annotated[int, Range(0, 100)]:
                return factor * 10

        method = _member(walker.walk(Calculator), "scale")

        assert method.parameters[0].annotations[0].type.name == "Range"
        assert method.return_annotations[0].type.name == "Range"
        assert method.return_type.full_name == "int"


class TestWalkAndRender:
    """End-to-end tests from a live class to pseudo-source."""

    def test_static_context(self, person_tree):
        """Test rendering without an instance: class-level values only."""
        renderer = NodeRenderer(CSharpProfile())

        assert renderer.render_member(_member(person_tree, "MAX_AGE")) == "public const int MAX_AGE = 150;"
        assert renderer.render_member(_member(person_tree, "count")) == "public static int count = 0;"
        assert renderer.render_member(_member(person_tree, "default_age")) == (
            "public static int default_age () // = 30"
        )
        assert renderer.render_member(_member(person_tree, "get_name")) == "public virtual str get_name ()"

    def test_instance_values(self, person_tree):
        """Test that a live instance supplies field, property and method values."""
        renderer = NodeRenderer(CSharpProfile())
        person = Person()

        assert renderer.render_member(_member(person_tree, "title"), person) == (
            'public virtual str title {get /* = "Mr" */;set;}'
        )
        assert renderer.render_member(_member(person_tree, "get_name"), person) == (
            'public virtual str get_name () // = "Bob"'
        )
        assert renderer.render_member(_member(person_tree, "explode"), person) == (
            "public virtual int explode ()"
        )

    def test_header_and_constructor(self, person_tree):
        blocks = render_tree(person_tree, CSharpProfile())

        assert blocks[0] == (
            '[sample_types.Obsolete(message="Use Employee", is_error=False)]\n'
            "public class sample_types.Person"
        )
        assert blocks[1] == "// No Base Type"
        assert blocks[2] == "public Person (optionalhasdefaultstr name, optionalhasdefaultint age)"

    def test_sized_field_value(self, walker):
        """Test that wrapper-typed class values keep their literal suffix."""
        total = _member(walker.walk(Counter), "total")
        assert NodeRenderer(VisualBasicProfile()).render_member(total).endswith("total = 42L")

    def test_enum_rendering(self, walker):
        blocks = render_tree(walker.walk(Color), CSharpProfile())

        assert blocks[0] == "public enum sample_types.Color"
        assert "RED = 1," in blocks
        assert "GREEN = 2," in blocks

    def test_method_calling_exit_does_not_abort_rendering(self, walker):
        """Test that SystemExit from an invoked method leaves the method bare."""
        blocks = render_tree(walker.walk(Quitter), CSharpProfile(), Quitter())
        assert "public virtual int shutdown ()" in blocks
