"""
Tests for typereflect.schema module.

Tests the descriptor records: TypeRef, AnnotationInstance, TypeDescriptor
and the member variants.
"""

from dataclasses import dataclass

import pytest

from typereflect.schema import (
    AnnotationInstance,
    ConstructorDescriptor,
    EventDescriptor,
    FieldDescriptor,
    MemberFlags,
    MemberKind,
    MethodDescriptor,
    OtherDescriptor,
    ParameterDescriptor,
    PropertyDescriptor,
    TypeCategory,
    TypeDescriptor,
    TypeRef,
    qualified_name,
)


class TestTypeRef:
    """Tests for the TypeRef dataclass."""

    def test_simple_name_derived_from_full_name(self):
        """Test that the simple name defaults to the last component."""
        ref = TypeRef("System.Collections.ArrayList")

        assert ref.name == "ArrayList"
        assert str(ref) == "System.Collections.ArrayList"

    def test_explicit_simple_name(self):
        """Test that an explicit simple name is kept."""
        ref = TypeRef("outer.Inner.Nested", "Nested")
        assert ref.name == "Nested"

    def test_of_class(self):
        """Test building a reference from a class."""
        assert TypeRef.of(int) == TypeRef("int")
        assert TypeRef.of(TypeRef).full_name == "typereflect.schema.TypeRef"

    def test_of_is_idempotent(self):
        """Test that an existing TypeRef is returned unchanged."""
        ref = TypeRef("A.B")
        assert TypeRef.of(ref) is ref

    def test_qualified_name_drops_builtins(self):
        """Test that builtins are named without their module."""
        assert qualified_name(str) == "str"
        assert qualified_name(TypeDescriptor) == "typereflect.schema.TypeDescriptor"


class TestAnnotationInstance:
    """Tests for the AnnotationInstance dataclass."""

    def test_from_values_preserves_order(self):
        """Test that properties and fields keep their given order."""
        annotation = AnnotationInstance.from_values(
            "Example.Attr",
            properties={"P1": 1, "P2": 2},
            fields={"F1": 3},
        )

        assert annotation.property_names == ("P1", "P2")
        assert annotation.field_names == ("F1",)
        assert annotation.has_members is True
        assert annotation.target.P2 == 2

    def test_from_values_rejects_shared_names(self):
        """Test that a name cannot be both a property and a field."""
        with pytest.raises(ValueError, match="both a property and a field: Level"):
            AnnotationInstance.from_values(
                "Example.Attr",
                properties={"Level": 1},
                fields={"Level": 2},
            )

    def test_from_values_without_members(self):
        """Test an annotation with no values."""
        annotation = AnnotationInstance.from_values("Example.Marker")
        assert annotation.has_members is False

    def test_from_dataclass_object(self):
        """Test that dataclass fields become annotation fields."""

        @dataclass
        class Limit:
            low: int
            high: int
            _internal: int = 0

        annotation = AnnotationInstance.from_object(Limit(1, 5))

        assert annotation.type.name == "Limit"
        assert annotation.property_names == ()
        assert annotation.field_names == ("low", "high")

    def test_from_object_with_properties(self):
        """Test that public properties are read before instance attributes."""

        class Marker:
            def __init__(self):
                self.level = 3
                self._hidden = True

            @property
            def label(self):
                return "x"

            @property
            def _private(self):
                return "y"

        annotation = AnnotationInstance.from_object(Marker())

        assert annotation.property_names == ("label",)
        assert annotation.field_names == ("level",)


class TestTypeDescriptor:
    """Tests for the TypeDescriptor dataclass."""

    def test_defaults(self):
        """Test default type descriptor values."""
        desc = TypeDescriptor("Example.Foo")

        assert desc.name == "Foo"
        assert desc.category == TypeCategory.CLASS
        assert desc.is_public is True
        assert desc.base_type is None
        assert desc.interfaces == []

    def test_enums_are_value_types(self):
        """Test that enums count as value types."""
        assert TypeDescriptor("E", category=TypeCategory.ENUM).is_value_type is True
        assert TypeDescriptor("S", category=TypeCategory.VALUE_TYPE).is_value_type is True
        assert TypeDescriptor("C").is_value_type is False

    def test_ref(self):
        """Test the reference to a described type."""
        desc = TypeDescriptor("Example.Foo")
        assert desc.ref == TypeRef("Example.Foo", "Foo")

    def test_descriptors_are_frozen(self):
        """Test that descriptors cannot be modified."""
        desc = TypeDescriptor("Example.Foo")
        with pytest.raises(AttributeError):
            desc.is_public = False


class TestMemberDescriptors:
    """Tests for the member descriptor variants."""

    def test_kind_tags(self):
        """Verify each variant carries its own tag."""
        assert ConstructorDescriptor("ctor").kind == MemberKind.CONSTRUCTOR
        assert FieldDescriptor("f").kind == MemberKind.FIELD
        assert PropertyDescriptor("p").kind == MemberKind.PROPERTY
        assert MethodDescriptor("m").kind == MemberKind.METHOD
        assert EventDescriptor("e").kind == MemberKind.EVENT
        assert ParameterDescriptor("x").kind == MemberKind.PARAMETER
        assert OtherDescriptor("o").kind == MemberKind.OTHER

    def test_has_flag(self):
        """Test qualifier flag checks."""
        field = FieldDescriptor("f", flags=MemberFlags.PRIVATE | MemberFlags.STATIC)

        assert field.has(MemberFlags.PRIVATE)
        assert field.has(MemberFlags.STATIC)
        assert not field.has(MemberFlags.PUBLIC)

    def test_method_without_parameters(self):
        """Test zero-argument detection."""
        assert MethodDescriptor("m").takes_no_arguments is True
        assert MethodDescriptor("m", parameters=[ParameterDescriptor("x")]).takes_no_arguments is False

    def test_default_types(self):
        """Test that unset types default to object."""
        assert FieldDescriptor("f").field_type == TypeRef("object")
        assert MethodDescriptor("m").return_type == TypeRef("object")
