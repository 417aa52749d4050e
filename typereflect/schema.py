"""
TypeReflect Descriptor Schema

This module defines the inert, read-only records that describe a type and
its members. A metadata walker produces them; the renderer consumes them
and never mutates them.

Design Principles:
    1. Descriptors are frozen dataclasses; rendering is a pure function of them
    2. Every member variant carries a `kind` tag so rendering can dispatch
       through a single table instead of chained isinstance checks
    3. Live values are reached only through callables attached by the walker
       (`getter` / `invoker`), so a descriptor without one has nothing to probe
    4. Flags mirror the qualifier vocabulary of the language profiles

Member Variants:
    ConstructorDescriptor, FieldDescriptor, PropertyDescriptor,
    MethodDescriptor, EventDescriptor, ParameterDescriptor, OtherDescriptor
"""

import dataclasses
from dataclasses import dataclass, field
from enum import Enum, Flag, auto
from types import SimpleNamespace
from typing import Any, Callable, ClassVar, Optional


def qualified_name(cls: type) -> str:
    """
    Return the dotted name of a class, without the `builtins.` prefix.

    Args:
        cls: Any class object

    Returns:
        "module.QualName" for user classes, "QualName" for builtins
    """
    module = getattr(cls, "__module__", None)
    qualname = getattr(cls, "__qualname__", None) or getattr(cls, "__name__", repr(cls))
    if not module or module == "builtins":
        return qualname
    return f"{module}.{qualname}"


class TypeCategory(Enum):
    """Kinds of type declarations a profile has a keyword for."""
    CLASS = auto()
    ENUM = auto()
    VALUE_TYPE = auto()
    INTERFACE = auto()
    UNKNOWN = auto()            # Rendered with the fallback keyword "type"


class MemberKind(Enum):
    """Tag identifying the shape of a member descriptor."""
    CONSTRUCTOR = auto()
    FIELD = auto()
    PROPERTY = auto()
    METHOD = auto()
    EVENT = auto()
    PARAMETER = auto()
    OTHER = auto()


class MemberFlags(Flag):
    """Visibility and modality qualifiers of a member."""
    NONE = 0
    PUBLIC = auto()
    FAMILY = auto()             # protected
    ASSEMBLY = auto()           # internal / friend
    PRIVATE = auto()
    STATIC = auto()
    FINAL = auto()
    ABSTRACT = auto()
    VIRTUAL = auto()
    LITERAL = auto()            # compile-time constant


class ParameterFlags(Flag):
    """
    Direction and optionality bits of a parameter.

    Each bit is distinct, including RESERVED_MASK, so a parameter flagged
    OPTIONAL | HAS_DEFAULT renders exactly "optionalhasdefault".
    """
    NONE = 0
    IN = auto()
    OUT = auto()
    LCID = auto()
    RETVAL = auto()
    OPTIONAL = auto()
    HAS_DEFAULT = auto()
    HAS_FIELD_MARSHAL = auto()
    RESERVED_MASK = auto()
    RESERVED3 = auto()
    RESERVED4 = auto()


@dataclass(frozen=True)
class TypeRef:
    """
    A reference to a type by name.

    Attributes:
        full_name: Qualified name (e.g., "Example.Foo", "collections.OrderedDict")
        name: Simple name; defaults to the last dotted component of full_name
    """
    full_name: str
    name: Optional[str] = None

    def __post_init__(self):
        if self.name is None:
            object.__setattr__(self, "name", self.full_name.rsplit(".", 1)[-1])

    def __str__(self) -> str:
        return self.full_name

    @classmethod
    def of(cls, value: "TypeRef | str | type") -> "TypeRef":
        """Coerce a string, a class, or an existing TypeRef into a TypeRef."""
        if isinstance(value, TypeRef):
            return value
        if isinstance(value, type):
            return cls(qualified_name(value), value.__name__)
        return cls(str(value))


def _object_type() -> TypeRef:
    return TypeRef("object")


@dataclass(frozen=True)
class AnnotationInstance:
    """
    A metadata object attached to a type, member, parameter or return value.

    Its values are re-derived from `target` each time it is rendered:
    properties first, then fields, each group in declared order.

    Attributes:
        type: The annotation's own type
        target: The live object the values are read from
        property_names: Names read as properties (rendered first)
        field_names: Names read as fields (rendered after properties)

    Example:
        >>> obsolete = AnnotationInstance.from_values(
        ...     "System.ObsoleteAttribute",
        ...     properties={"Message": "Use Bar", "IsError": False},
        ... )
    """
    type: TypeRef
    target: Any = field(default=None, compare=False)
    property_names: tuple[str, ...] = ()
    field_names: tuple[str, ...] = ()

    @property
    def has_members(self) -> bool:
        """True if the annotation carries any property or field values."""
        return bool(self.property_names or self.field_names)

    @classmethod
    def from_object(cls, obj: Any) -> "AnnotationInstance":
        """
        Describe a live object as an annotation instance.

        Properties are the public `property` attributes of the object's
        class (most-derived class first, definition order within a class).
        Fields are the dataclass fields of the object, or its public
        instance attributes when it is not a dataclass.

        Args:
            obj: The annotation object

        Returns:
            An AnnotationInstance reading its values from `obj`
        """
        obj_type = type(obj)

        property_names: list[str] = []
        for klass in obj_type.__mro__:
            if klass is object:
                continue
            for name, attr in vars(klass).items():
                if (isinstance(attr, property) and not name.startswith("_")
                        and name not in property_names):
                    property_names.append(name)

        if dataclasses.is_dataclass(obj):
            candidates = [f.name for f in dataclasses.fields(obj)]
        else:
            candidates = list(getattr(obj, "__dict__", {}))
        field_names = [
            name for name in candidates
            if not name.startswith("_") and name not in property_names
        ]

        return cls(
            type=TypeRef.of(obj_type),
            target=obj,
            property_names=tuple(property_names),
            field_names=tuple(field_names),
        )

    @classmethod
    def from_values(
        cls,
        type_name: str,
        properties: Optional[dict[str, Any]] = None,
        fields: Optional[dict[str, Any]] = None,
    ) -> "AnnotationInstance":
        """
        Build an annotation instance from plain name/value mappings.

        Raises:
            ValueError: If a name is given both as a property and a field
        """
        properties = properties or {}
        fields = fields or {}
        shared = [name for name in properties if name in fields]
        if shared:
            raise ValueError(
                f"Annotation '{type_name}' names both a property and a field: "
                f"{', '.join(shared)}"
            )
        return cls(
            type=TypeRef(type_name),
            target=SimpleNamespace(**properties, **fields),
            property_names=tuple(properties),
            field_names=tuple(fields),
        )


@dataclass(frozen=True)
class TypeDescriptor:
    """
    Description of one type declaration.

    Attributes:
        full_name: Qualified type name
        name: Simple name; defaults to the last dotted component of full_name
        category: Which declaration keyword applies
        is_public: Whether the type is publicly visible
        is_sealed: Whether the type cannot be derived from
        is_abstract: Whether the type cannot be instantiated
        is_serializable: Whether the type carries the serializable bit
        annotations: Attached annotation instances, in discovery order
        base_type: The base type, or None for root types
        interfaces: Implemented interfaces, in walker order
    """
    full_name: str
    name: Optional[str] = None
    category: TypeCategory = TypeCategory.CLASS
    is_public: bool = True
    is_sealed: bool = False
    is_abstract: bool = False
    is_serializable: bool = False
    annotations: list[AnnotationInstance] = field(default_factory=list)
    base_type: Optional[TypeRef] = None
    interfaces: list[TypeRef] = field(default_factory=list)

    def __post_init__(self):
        if self.name is None:
            object.__setattr__(self, "name", self.full_name.rsplit(".", 1)[-1])

    @property
    def is_value_type(self) -> bool:
        """Enums and structures are both value types."""
        return self.category in (TypeCategory.ENUM, TypeCategory.VALUE_TYPE)

    @property
    def is_interface(self) -> bool:
        return self.category == TypeCategory.INTERFACE

    @property
    def is_enum(self) -> bool:
        return self.category == TypeCategory.ENUM

    @property
    def ref(self) -> TypeRef:
        """A TypeRef pointing at this type."""
        return TypeRef(self.full_name, self.name)


@dataclass(frozen=True)
class MemberDescriptor:
    """
    Common part of every member descriptor.

    Attributes:
        name: Member name
        flags: Visibility/modality qualifiers
        annotations: Attached annotation instances, in discovery order
        declaring_type: The type declaring this member
    """
    kind: ClassVar[MemberKind]

    name: str
    flags: MemberFlags = MemberFlags.NONE
    annotations: list[AnnotationInstance] = field(default_factory=list)
    declaring_type: Optional[TypeRef] = None

    def has(self, flag: MemberFlags) -> bool:
        """Check whether a qualifier flag is set."""
        return bool(self.flags & flag)


@dataclass(frozen=True)
class ParameterDescriptor(MemberDescriptor):
    """A formal parameter of a constructor or method."""
    kind: ClassVar[MemberKind] = MemberKind.PARAMETER

    parameter_type: TypeRef = field(default_factory=_object_type)
    attributes: ParameterFlags = ParameterFlags.NONE


@dataclass(frozen=True)
class ConstructorDescriptor(MemberDescriptor):
    kind: ClassVar[MemberKind] = MemberKind.CONSTRUCTOR

    parameters: list[ParameterDescriptor] = field(default_factory=list)
    is_internal_call: bool = False


@dataclass(frozen=True)
class MethodDescriptor(MemberDescriptor):
    """
    A method, including property and event accessors.

    Attributes:
        return_type: Declared return type
        parameters: Formal parameters, in order
        is_special_name: True for compiler-synthesized methods
        return_annotations: Annotation instances attached to the return value
        is_internal_call: True when the method is implemented by the runtime
        invoker: Calls the method on an instance (or None for a static
            context); only used for methods without parameters
    """
    kind: ClassVar[MemberKind] = MemberKind.METHOD

    return_type: TypeRef = field(default_factory=_object_type)
    parameters: list[ParameterDescriptor] = field(default_factory=list)
    is_special_name: bool = False
    return_annotations: list[AnnotationInstance] = field(default_factory=list)
    is_internal_call: bool = False
    invoker: Optional[Callable[[Any], Any]] = field(default=None, compare=False, repr=False)

    @property
    def takes_no_arguments(self) -> bool:
        return not self.parameters


@dataclass(frozen=True)
class FieldDescriptor(MemberDescriptor):
    """
    A field or enum constant.

    Attributes:
        field_type: Declared type of the field
        is_enum_member: True when the field is a constant of an enum
        is_special_name: True for compiler-synthesized fields
        getter: Reads the field from an instance (or None for a static context)
    """
    kind: ClassVar[MemberKind] = MemberKind.FIELD

    field_type: TypeRef = field(default_factory=_object_type)
    is_enum_member: bool = False
    is_special_name: bool = False
    getter: Optional[Callable[[Any], Any]] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class PropertyDescriptor(MemberDescriptor):
    """
    A property with optional get/set accessors.

    Qualifiers come from the first accessor, not from `flags`.
    """
    kind: ClassVar[MemberKind] = MemberKind.PROPERTY

    property_type: TypeRef = field(default_factory=_object_type)
    can_read: bool = True
    can_write: bool = False
    accessors: list[MethodDescriptor] = field(default_factory=list)
    getter: Optional[Callable[[Any], Any]] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class EventDescriptor(MemberDescriptor):
    """An event; its qualifiers come from the add accessor."""
    kind: ClassVar[MemberKind] = MemberKind.EVENT

    handler_type: TypeRef = field(default_factory=_object_type)
    is_multicast: bool = False
    add_method: Optional[MethodDescriptor] = None


@dataclass(frozen=True)
class OtherDescriptor(MemberDescriptor):
    """Free-form node, such as a return value, carrying only a description."""
    kind: ClassVar[MemberKind] = MemberKind.OTHER

    description: Optional[str] = None
    is_return_value: bool = False


@dataclass
class TypeTree:
    """
    A type together with the members the walker chose to surface.

    The renderer does not reorder `members`.
    """
    type: TypeDescriptor
    members: list[MemberDescriptor] = field(default_factory=list)
