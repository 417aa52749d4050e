"""
TypeReflect Pseudo-Source Renderer

This module renders type and member descriptors as pseudo-source text in
the syntax of a language profile. The output is documentation: it is meant
to be read, not compiled.

Design Principles:
    1. One rule per member shape, selected through a single dispatch table
    2. All syntax comes from the profile; nothing here is language-specific
    3. Best effort: values that cannot be probed are simply left out, and no
       rendering operation raises because a member could not be inspected
    4. Deterministic: output depends only on the descriptors, the profile and
       the instance, except where an invoked method has side effects

Output Blocks (render_tree):
    1. Type header (annotations, qualifiers, keyword, full name)
    2. Base-type line, or a comment when there is none
    3. One line per implemented interface
    4. One block per member, in the order the walker supplied them
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from typereflect.encoder import ValueEncoder
from typereflect.probe import ABSENT, try_invoke, try_read
from typereflect.profiles.base import LanguageProfile
from typereflect.qualifiers import (
    field_qualifiers,
    format_qualifiers,
    method_qualifiers,
    parameter_flags,
    type_qualifiers,
)
from typereflect.schema import (
    AnnotationInstance,
    ConstructorDescriptor,
    EventDescriptor,
    FieldDescriptor,
    MemberDescriptor,
    MemberKind,
    MethodDescriptor,
    OtherDescriptor,
    ParameterDescriptor,
    PropertyDescriptor,
    TypeCategory,
    TypeDescriptor,
    TypeRef,
    TypeTree,
)

logger = logging.getLogger(__name__)

SERIALIZABLE_ATTRIBUTE = "Serializable"
INTERNAL_CALL_ATTRIBUTE = "MethodImplAttribute(MethodImplOptions.InternalCall)"
NULL_DESCRIPTION = "<null other description/>"


@dataclass
class RenderOptions:
    """
    Configuration options for rendering.

    Attributes:
        probe_values: Read field and property values from the instance
        invoke_methods: Call zero-argument methods and show their results
        include_pseudo_attributes: Emit the Serializable / InternalCall
            pseudo-annotations derived from descriptor flags
    """
    probe_values: bool = True
    invoke_methods: bool = True
    include_pseudo_attributes: bool = True


class NodeRenderer:
    """
    Renders descriptors into pseudo-source text for one language profile.

    The renderer holds no state between calls; one instance can render any
    number of types, and separate instances may run in parallel.

    Usage:
        renderer = NodeRenderer(CSharpProfile())
        header = renderer.render_type(type_desc)
        line = renderer.render_member(field_desc, instance)

        # Without side effects from method invocation
        options = RenderOptions(invoke_methods=False)
        renderer = NodeRenderer(CSharpProfile(), options)
    """

    def __init__(
        self,
        profile: LanguageProfile,
        options: Optional[RenderOptions] = None,
    ):
        """
        Initialize the renderer.

        Args:
            profile: The target syntax
            options: Rendering options (uses defaults if not provided)
        """
        self.profile = profile
        self.options = options or RenderOptions()
        self.encoder = ValueEncoder(profile.literal_formats)
        self._renderers: dict[MemberKind, Callable[[Any, Any], str]] = {
            MemberKind.CONSTRUCTOR: self.render_constructor,
            MemberKind.FIELD: self.render_field,
            MemberKind.PROPERTY: self.render_property,
            MemberKind.METHOD: self.render_method,
            MemberKind.EVENT: self.render_event,
            MemberKind.PARAMETER: self.render_parameter,
            MemberKind.OTHER: self.render_other,
        }

    # === Types ===

    def render_type(self, type_desc: TypeDescriptor, instance: Any = None) -> str:
        """
        Render a type header.

        Args:
            type_desc: The type to declare
            instance: Unused; accepted for symmetry with member rendering

        Returns:
            e.g. "public sealed class Example.Foo"
        """
        text = ""
        if type_desc.is_serializable and self.options.include_pseudo_attributes:
            text += self._pseudo_attribute(SERIALIZABLE_ATTRIBUTE, newline=True)
        text += self.render_annotations(type_desc.annotations)
        text += format_qualifiers(type_qualifiers(self.profile, type_desc))
        text += f"{self.type_keyword(type_desc)} {type_desc.full_name}"
        return text

    def type_keyword(self, type_desc: TypeDescriptor) -> str:
        """Declaration keyword for a type; "type" when the category is unknown."""
        keywords = {
            TypeCategory.CLASS: self.profile.keyword_class,
            TypeCategory.ENUM: self.profile.keyword_enum,
            TypeCategory.VALUE_TYPE: self.profile.keyword_value_type,
            TypeCategory.INTERFACE: self.profile.keyword_interface,
        }
        return keywords.get(type_desc.category, "type")

    def render_base_type(
        self,
        base: Optional[Union[TypeRef, TypeDescriptor]],
        instance: Any = None,
    ) -> str:
        """Render the base-type line, or a comment noting there is none."""
        if base is not None:
            return f"{self.profile.keyword_inherits} {base.name}"
        return f"{self.profile.line_comment} No Base Type"

    def render_interface(
        self,
        interface: Union[TypeRef, TypeDescriptor],
        instance: Any = None,
    ) -> str:
        return f"{self.profile.keyword_implements} {interface.name}"

    # === Members ===

    def render_member(self, member: MemberDescriptor, instance: Any = None) -> str:
        """
        Render any member descriptor by dispatching on its kind.

        Args:
            member: The member to render
            instance: Live instance used for probing, or None

        Returns:
            The rendered member text

        Raises:
            TypeError: If `member` is not a member descriptor
        """
        render = self._renderers.get(getattr(member, "kind", None))
        if render is None:
            raise TypeError(f"Not a member descriptor: {member!r}")
        return render(member, instance)

    def render_constructor(self, ctor: ConstructorDescriptor, instance: Any = None) -> str:
        text = self._member_annotations(ctor)
        text += format_qualifiers(method_qualifiers(self.profile, ctor))
        text += f"{self.profile.constructor_name(ctor)} "
        text += self._parameter_list(ctor.parameters)
        return text

    def render_field(self, field: FieldDescriptor, instance: Any = None) -> str:
        """
        Render a field or enum constant.

        Plain enum constants omit qualifiers and type and end with the
        statement separator; every other field ends with the terminator.
        A value clause is added only when the probe succeeds.
        """
        declared = not field.is_enum_member or field.is_special_name

        text = self.render_annotations(field.annotations)
        if declared:
            text += format_qualifiers(field_qualifiers(self.profile, field))
            text += f"{field.field_type} "

        text += field.name

        value = self._probe(field, instance)
        if value is not ABSENT:
            text += f" = {self.encoder.encode(value)}"

        if declared:
            text += self.profile.keyword_statement_terminator
        else:
            text += self.profile.keyword_statement_separator
        return text

    def render_method(self, method: MethodDescriptor, instance: Any = None) -> str:
        """
        Render a method declaration.

        Zero-argument methods are invoked once and their result appended as
        a trailing comment. Specially named methods are rendered entirely as
        commentary: a leading note, and every line break re-indented behind
        the line-comment marker.
        """
        comment = self.profile.line_comment

        text = ""
        if method.is_special_name:
            text += f"{comment} Method is a specially named method:\n"

        text += self._member_annotations(method)
        text += self.render_annotations(method.return_annotations, prefix="return: ")
        text += format_qualifiers(method_qualifiers(self.profile, method))
        text += self.profile.method_declaration(
            method.return_type,
            method.name,
            self._parameter_list(method.parameters),
        )

        if method.takes_no_arguments and self.options.invoke_methods:
            result = try_invoke(method, instance)
            if result is not ABSENT:
                text += f" {comment} = {self.encoder.encode(result)}"

        if method.is_special_name:
            text = text.replace("\n", f"\n{comment}\t")
        return text

    def render_property(self, prop: PropertyDescriptor, instance: Any = None) -> str:
        """
        Render a property as `Type Name {get;set;}`.

        Qualifiers come from the first accessor. A readable property whose
        value can be probed shows it in an inline comment after `get`.
        """
        accessor = prop.accessors[0] if prop.accessors else None
        open_comment, close_comment = self.profile.inline_comment_delimiters

        text = self.render_annotations(prop.annotations)
        text += format_qualifiers(method_qualifiers(self.profile, accessor))
        text += f"{prop.property_type} {prop.name} {{"
        if prop.can_read:
            text += "get"
            value = self._probe(prop, instance)
            if value is not ABSENT:
                text += f" {open_comment} = {self.encoder.encode(value)} {close_comment}"
            text += ";"
        if prop.can_write:
            text += "set;"
        text += "}"
        return text

    def render_event(self, event: EventDescriptor, instance: Any = None) -> str:
        text = format_qualifiers(method_qualifiers(self.profile, event.add_method))
        if event.is_multicast:
            text += f"{self.profile.keyword_multicast} "
        text += f"{event.handler_type} {event.name}"
        return text

    def render_parameter(self, param: ParameterDescriptor, instance: Any = None) -> str:
        """Render a parameter: inline annotations, flag abbreviations, type and name."""
        text = self.render_annotations(param.annotations, newline=False)
        text += parameter_flags(param.attributes)
        text += f"{param.parameter_type} {param.name}"
        return text

    def render_other(self, node: OtherDescriptor, instance: Any = None) -> str:
        if node.is_return_value:
            return self.render_return_value(node, instance)
        return self._description(node)

    def render_return_value(self, node: OtherDescriptor, instance: Any = None) -> str:
        return f"{self.profile.line_comment} ReturnValue={self._description(node)}"

    # === Annotations ===

    def render_annotations(
        self,
        annotations: list[AnnotationInstance],
        prefix: str = "",
        newline: bool = True,
    ) -> str:
        """
        Render annotation instances in discovery order.

        Args:
            annotations: The annotation instances to render
            prefix: Text placed before each type name (e.g., "return: ")
            newline: Follow each annotation with a line break

        Returns:
            e.g. '[System.ObsoleteAttribute(Message="x", IsError=False)]\\n'
        """
        open_delim, close_delim = self.profile.annotation_delimiters
        text = ""
        for annotation in annotations:
            text += f"{open_delim}{prefix}{annotation.type.full_name}"
            if annotation.has_members:
                text += f"({self.encoder.encode_members(annotation)})"
            text += close_delim
            if newline:
                text += "\n"
        return text

    # === Helpers ===

    def _member_annotations(self, member: Union[MethodDescriptor, ConstructorDescriptor]) -> str:
        """Pseudo-annotations from method flags, then custom annotations."""
        text = ""
        if member.is_internal_call and self.options.include_pseudo_attributes:
            text += self._pseudo_attribute(INTERNAL_CALL_ATTRIBUTE, newline=True)
        return text + self.render_annotations(member.annotations)

    def _pseudo_attribute(self, attribute: str, newline: bool) -> str:
        open_delim, close_delim = self.profile.annotation_delimiters
        text = f"{open_delim}{attribute}{close_delim}"
        if newline:
            text += "\n"
        return text

    def _parameter_list(self, parameters: list[ParameterDescriptor]) -> str:
        return "(" + ", ".join(self.render_parameter(p) for p in parameters) + ")"

    def _probe(self, member: Union[FieldDescriptor, PropertyDescriptor], instance: Any) -> Any:
        if not self.options.probe_values:
            return ABSENT
        return try_read(member, instance)

    @staticmethod
    def _description(node: OtherDescriptor) -> str:
        if node.description is not None:
            return str(node.description)
        return NULL_DESCRIPTION

    # === Whole types ===

    def render_tree(self, tree: TypeTree, instance: Any = None) -> list[str]:
        """
        Render a type and all of its members as separate text blocks.

        Args:
            tree: The type and the members to render, in walker order
            instance: Live instance used for probing, or None

        Returns:
            Text blocks: header, base type, interfaces, then members
        """
        type_desc = tree.type
        blocks = [
            self.render_type(type_desc, instance),
            self.render_base_type(type_desc.base_type, instance),
        ]
        blocks.extend(self.render_interface(i, instance) for i in type_desc.interfaces)
        blocks.extend(self.render_member(m, instance) for m in tree.members)
        logger.debug("Rendered %s as %d blocks", type_desc.full_name, len(blocks))
        return blocks


def render_type(
    type_desc: TypeDescriptor,
    profile: LanguageProfile,
    instance: Any = None,
    options: Optional[RenderOptions] = None,
) -> str:
    """
    Convenience function to render a single type header.

    Example:
        from typereflect.profiles import CSharpProfile
        from typereflect.schema import TypeDescriptor

        header = render_type(TypeDescriptor("Example.Foo", is_sealed=True), CSharpProfile())
        # 'public sealed class Example.Foo'
    """
    return NodeRenderer(profile, options).render_type(type_desc, instance)


def render_tree(
    tree: TypeTree,
    profile: LanguageProfile,
    instance: Any = None,
    options: Optional[RenderOptions] = None,
) -> list[str]:
    """
    Convenience function to render a type and its members.

    Example:
        from typereflect.profiles import create_profile_registry
        from typereflect.walker import TypeWalker

        tree = TypeWalker().walk(MyClass)
        profile = create_profile_registry().get("csharp")
        print("\\n".join(render_tree(tree, profile, MyClass())))
    """
    return NodeRenderer(profile, options).render_tree(tree, instance)
