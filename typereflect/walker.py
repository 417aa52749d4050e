"""
TypeReflect Metadata Walker

This module builds descriptor trees from live Python classes, so that any
importable class can be rendered. It plays the role of the type-library
walker: it decides which members to surface and in what order, and
attaches the callables the renderer uses to probe values.

Mapping Rules:
    - Category: Enum subclasses are enums, Protocols are interfaces, named
      tuples and frozen dataclasses are value types, everything else a class
    - Visibility: "__name" is private, "_name" is family (protected),
      anything else (including dunder names) is public
    - Modality: instance methods are virtual, static and class methods are
      static, abstract methods abstract, typing.final members final
    - Fields: Final annotations are literal, ClassVar annotations and plain
      class attributes are static
    - Annotations: typing.Annotated metadata on fields, parameters and
      return values, plus objects attached with the `attributes` decorator

Limitations:
    - Only members declared by the class itself are described
    - Python has no events; the walker never produces EventDescriptors
    - String annotations that cannot be resolved are shown verbatim
"""

import dataclasses
import importlib
import inspect
import logging
import types
import typing
from enum import Enum
from typing import Annotated, Any, Callable, ClassVar, Final, Optional

from typereflect.schema import (
    AnnotationInstance,
    ConstructorDescriptor,
    FieldDescriptor,
    MemberDescriptor,
    MemberFlags,
    MethodDescriptor,
    ParameterDescriptor,
    ParameterFlags,
    PropertyDescriptor,
    TypeCategory,
    TypeDescriptor,
    TypeRef,
    TypeTree,
    qualified_name,
)

logger = logging.getLogger(__name__)

ANNOTATIONS_ATTR = "__typereflect_annotations__"

# Bases that are plumbing rather than part of a type's shape
_IGNORED_BASES = (object, typing.Generic, typing.Protocol)

# Class attributes added by the runtime or the standard library
_INTERNAL_NAMES = frozenset({
    "_is_protocol",
    "_is_runtime_protocol",
    "_fields",
    "_field_defaults",
    "_member_names_",
    "_member_map_",
    "_value2member_map_",
    "_unhashable_values_",
    "_member_type_",
    "_value_repr_",
    "_new_member_",
    "_use_args_",
    "_hashable_values_",
})

_BUILTIN_METHOD_TYPES = (
    types.BuiltinFunctionType,
    types.WrapperDescriptorType,
    types.MethodDescriptorType,
    types.ClassMethodDescriptorType,
)


def attributes(*annotations: Any) -> Callable:
    """
    Attach annotation objects to a class or function.

    The objects are rendered as annotation instances, in the order given;
    stacked decorators keep source order (topmost first).

    Example:
        @attributes(Obsolete("Use Bar instead"))
        class Foo:
            ...
    """
    def decorate(target):
        if isinstance(target, type):
            existing = vars(target).get(ANNOTATIONS_ATTR, ())
        else:
            existing = getattr(target, ANNOTATIONS_ATTR, ())
        setattr(target, ANNOTATIONS_ATTR, tuple(annotations) + tuple(existing))
        return target
    return decorate


def resolve_type(spec: str) -> type:
    """
    Import a class from a "package.module:Qual.Name" specification.

    "package.module.Name" is also accepted; the last dotted component is
    then taken as the class name.

    Args:
        spec: The class specification

    Returns:
        The class object

    Raises:
        ValueError: If the module cannot be imported or the name is not a class
    """
    if ":" in spec:
        module_name, _, qualname = spec.partition(":")
    else:
        module_name, _, qualname = spec.rpartition(".")

    if not module_name or not qualname:
        raise ValueError(f"Invalid type specification '{spec}' (expected module:Type)")

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Could not import module '{module_name}': {e}")

    for part in qualname.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise ValueError(f"Module '{module_name}' has no attribute '{qualname}'")

    if not isinstance(obj, type):
        raise ValueError(f"'{spec}' is not a class")
    return obj


class _Empty:
    """Marker for a missing type annotation."""


def _visibility(name: str, owner: Optional[type] = None) -> MemberFlags:
    # "__name" inside a class body is stored mangled as "_Owner__name"
    if owner is not None and name.startswith(f"_{owner.__name__.lstrip('_')}__"):
        return MemberFlags.PRIVATE
    if name.startswith("__") and name.endswith("__"):
        return MemberFlags.PUBLIC
    if name.startswith("__"):
        return MemberFlags.PRIVATE
    if name.startswith("_"):
        return MemberFlags.FAMILY
    return MemberFlags.PUBLIC


def _is_special_name(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


def _unwrap_hint(hint: Any) -> tuple[Any, list[Any], set]:
    """
    Strip Annotated, Final and ClassVar wrappers from a type hint.

    Returns:
        (inner hint, Annotated metadata objects, set of {Final, ClassVar} seen)
    """
    metadata: list[Any] = []
    wrappers: set = set()
    while True:
        origin = typing.get_origin(hint)
        if origin is Annotated:
            metadata.extend(hint.__metadata__)
            hint = hint.__origin__
        elif origin is ClassVar or origin is Final:
            wrappers.add(origin)
            args = typing.get_args(hint)
            hint = args[0] if args else _Empty
        elif hint is ClassVar or hint is Final:
            wrappers.add(hint)
            hint = _Empty
        else:
            return hint, metadata, wrappers


def _type_ref(hint: Any) -> TypeRef:
    """Describe a (possibly missing) type hint as a TypeRef."""
    if hint is _Empty or hint is inspect.Parameter.empty:
        return TypeRef("object")
    if hint is None or hint is type(None):
        return TypeRef("None")
    if isinstance(hint, type) and not typing.get_args(hint):
        return TypeRef.of(hint)
    if isinstance(hint, str):
        return TypeRef(hint)
    return TypeRef(repr(hint).replace("typing.", ""))


def _annotation_instances(objects: Any) -> list[AnnotationInstance]:
    return [AnnotationInstance.from_object(obj) for obj in objects]


def _type_hints(obj: Any) -> dict[str, Any]:
    """Resolved type hints with Annotated extras, falling back to raw annotations."""
    try:
        return typing.get_type_hints(obj, include_extras=True)
    except Exception:
        logger.debug("Could not resolve type hints of %r", obj, exc_info=True)
        return dict(getattr(obj, "__annotations__", None) or {})


class TypeWalker:
    """
    Builds a TypeTree from a live Python class.

    Usage:
        walker = TypeWalker()
        tree = walker.walk(MyClass)

        # Only public members
        tree = TypeWalker(include_private=False).walk(MyClass)

    Attributes:
        include_private: Whether private and family (protected) members are
            surfaced
    """

    def __init__(self, include_private: bool = True):
        self.include_private = include_private

    def walk(self, cls: type) -> TypeTree:
        """
        Describe a class and its own members.

        Members are ordered: constructor, fields, properties, methods, each
        group in definition order.

        Args:
            cls: The class to describe

        Returns:
            The type descriptor and its member descriptors
        """
        type_desc = self.describe_type(cls)
        ref = type_desc.ref

        members: list[MemberDescriptor] = []
        ctor = self._describe_constructor(cls, ref)
        if ctor is not None:
            members.append(ctor)
        members.extend(self._describe_fields(cls, ref, type_desc))
        members.extend(self._describe_properties(cls, ref))
        members.extend(self._describe_methods(cls, ref))

        if not self.include_private:
            hidden = MemberFlags.PRIVATE | MemberFlags.FAMILY
            members = [m for m in members if not m.flags & hidden]

        logger.debug("Walked %s: %d members", type_desc.full_name, len(members))
        return TypeTree(type=type_desc, members=members)

    def describe_type(self, cls: type) -> TypeDescriptor:
        """Describe the class itself: name, category, flags and bases."""
        if issubclass(cls, Enum):
            category = TypeCategory.ENUM
        elif getattr(cls, "_is_protocol", False):
            category = TypeCategory.INTERFACE
        elif (issubclass(cls, tuple) and hasattr(cls, "_fields")) or (
            dataclasses.is_dataclass(cls) and cls.__dataclass_params__.frozen
        ):
            category = TypeCategory.VALUE_TYPE
        else:
            category = TypeCategory.CLASS

        bases = [b for b in cls.__bases__ if b not in _IGNORED_BASES]
        if category == TypeCategory.INTERFACE:
            base_type = None
            interfaces = bases
        else:
            base_type = bases[0] if bases else None
            interfaces = bases[1:]

        return TypeDescriptor(
            full_name=qualified_name(cls),
            name=cls.__name__,
            category=category,
            is_public=not cls.__name__.startswith("_"),
            is_sealed=getattr(cls, "__final__", False) is True,
            is_abstract=inspect.isabstract(cls),
            annotations=_annotation_instances(vars(cls).get(ANNOTATIONS_ATTR, ())),
            base_type=TypeRef.of(base_type) if base_type is not None else None,
            interfaces=[TypeRef.of(i) for i in interfaces],
        )

    # === Constructors and methods ===

    def _describe_constructor(self, cls: type, ref: TypeRef) -> Optional[ConstructorDescriptor]:
        init = vars(cls).get("__init__")
        if init is None:
            return None

        internal = isinstance(init, _BUILTIN_METHOD_TYPES)
        if not internal and not inspect.isfunction(init):
            return None

        return ConstructorDescriptor(
            name="__init__",
            flags=MemberFlags.PUBLIC,
            annotations=_annotation_instances(getattr(init, ANNOTATIONS_ATTR, ())),
            declaring_type=ref,
            parameters=self._describe_parameters(init, skip_first=True) or [],
            is_internal_call=internal,
        )

    def _describe_methods(self, cls: type, ref: TypeRef) -> list[MethodDescriptor]:
        methods = []
        for name, attr in vars(cls).items():
            if name == "__init__":
                continue

            flags = _visibility(name, cls)
            if isinstance(attr, (staticmethod, classmethod)):
                func = attr.__func__
                flags |= MemberFlags.STATIC
                skip_first = isinstance(attr, classmethod)
            elif inspect.isfunction(attr) or isinstance(attr, _BUILTIN_METHOD_TYPES):
                func = attr
                flags |= MemberFlags.VIRTUAL
                skip_first = True
            else:
                continue

            # Skip functions inherited into the class dict (e.g., by Enum)
            func_qualname = getattr(func, "__qualname__", "")
            if not func_qualname.startswith(f"{cls.__qualname__}."):
                continue

            if getattr(func, "__isabstractmethod__", False):
                flags |= MemberFlags.ABSTRACT
            if getattr(func, "__final__", False) is True:
                flags = (flags & ~MemberFlags.VIRTUAL) | MemberFlags.FINAL

            methods.append(self._describe_method(cls, ref, name, func, flags, skip_first))
        return methods

    def _describe_method(
        self,
        cls: type,
        ref: TypeRef,
        name: str,
        func: Callable,
        flags: MemberFlags,
        skip_first: bool,
    ) -> MethodDescriptor:
        internal = isinstance(func, _BUILTIN_METHOD_TYPES)
        hints = {} if internal else _type_hints(func)
        return_hint, return_metadata, _ = _unwrap_hint(hints.get("return", _Empty))

        parameters = self._describe_parameters(func, skip_first)
        signature_known = parameters is not None

        def invoke(instance: Any, _name: str = name) -> Any:
            target = cls if instance is None else instance
            return getattr(target, _name)()

        return MethodDescriptor(
            name=name,
            flags=flags,
            annotations=_annotation_instances(getattr(func, ANNOTATIONS_ATTR, ())),
            declaring_type=ref,
            return_type=_type_ref(return_hint),
            parameters=parameters or [],
            is_special_name=_is_special_name(name),
            return_annotations=_annotation_instances(return_metadata),
            is_internal_call=internal,
            invoker=invoke if signature_known else None,
        )

    def _describe_parameters(
        self,
        func: Callable,
        skip_first: bool,
    ) -> Optional[list[ParameterDescriptor]]:
        """
        Describe a function's parameters.

        Returns:
            The parameter descriptors, or None if the signature is unavailable
        """
        try:
            signature = inspect.signature(func)
        except (TypeError, ValueError):
            logger.debug("No signature available for %r", func)
            return None

        hints = _type_hints(func) if inspect.isfunction(func) else {}
        params = list(signature.parameters.values())
        if skip_first and params:
            params = params[1:]

        described = []
        for param in params:
            hint, metadata, _ = _unwrap_hint(hints.get(param.name, param.annotation))

            attrs = ParameterFlags.NONE
            if param.default is not inspect.Parameter.empty:
                attrs |= ParameterFlags.OPTIONAL | ParameterFlags.HAS_DEFAULT

            name = param.name
            if param.kind == inspect.Parameter.VAR_POSITIONAL:
                name = f"*{name}"
            elif param.kind == inspect.Parameter.VAR_KEYWORD:
                name = f"**{name}"

            described.append(ParameterDescriptor(
                name=name,
                annotations=_annotation_instances(metadata),
                parameter_type=_type_ref(hint),
                attributes=attrs,
            ))
        return described

    # === Fields and properties ===

    def _describe_fields(
        self,
        cls: type,
        ref: TypeRef,
        type_desc: TypeDescriptor,
    ) -> list[FieldDescriptor]:
        if type_desc.is_enum:
            return [
                FieldDescriptor(
                    name=name,
                    flags=MemberFlags.PUBLIC | MemberFlags.STATIC | MemberFlags.LITERAL,
                    declaring_type=ref,
                    field_type=ref,
                    is_enum_member=True,
                    getter=lambda instance, _member=member: _member.value,
                )
                for name, member in cls.__members__.items()
            ]

        own_annotations = dict(inspect.get_annotations(cls))
        hints = _type_hints(cls)
        class_dict = vars(cls)

        names = [n for n in own_annotations if not _is_special_name(n)]
        for name, value in class_dict.items():
            if name in own_annotations or (name.startswith("__") and name.endswith("__")):
                continue
            if name in _INTERNAL_NAMES or name.startswith("_abc_"):
                continue
            if callable(value) or hasattr(type(value), "__get__"):
                continue
            names.append(name)

        fields = []
        for name in names:
            flags = _visibility(name, cls)
            if name in own_annotations:
                hint, metadata, wrappers = _unwrap_hint(hints.get(name, own_annotations[name]))
                if Final in wrappers:
                    flags |= MemberFlags.LITERAL
                if ClassVar in wrappers:
                    flags |= MemberFlags.STATIC
                field_type = _type_ref(hint)
            else:
                metadata = []
                flags |= MemberFlags.STATIC
                field_type = TypeRef.of(type(class_dict[name]))

            def read(instance: Any, _name: str = name) -> Any:
                if instance is None:
                    static = inspect.getattr_static(cls, _name)
                    if hasattr(type(static), "__get__"):
                        raise AttributeError(f"Field '{_name}' needs an instance")
                    return static
                return getattr(instance, _name)

            fields.append(FieldDescriptor(
                name=name,
                flags=flags,
                annotations=_annotation_instances(metadata),
                declaring_type=ref,
                field_type=field_type,
                getter=read,
            ))
        return fields

    def _describe_properties(self, cls: type, ref: TypeRef) -> list[PropertyDescriptor]:
        properties = []
        for name, attr in vars(cls).items():
            if not isinstance(attr, property):
                continue

            flags = _visibility(name, cls) | MemberFlags.VIRTUAL
            if getattr(attr, "__isabstractmethod__", False):
                flags |= MemberFlags.ABSTRACT

            accessors = []
            return_hint: Any = _Empty
            if attr.fget is not None:
                return_hint, _, _ = _unwrap_hint(_type_hints(attr.fget).get("return", _Empty))
                accessors.append(MethodDescriptor(
                    name=f"get_{name}",
                    flags=flags,
                    declaring_type=ref,
                    return_type=_type_ref(return_hint),
                    is_special_name=True,
                ))
            if attr.fset is not None:
                accessors.append(MethodDescriptor(
                    name=f"set_{name}",
                    flags=flags,
                    declaring_type=ref,
                    return_type=TypeRef("None"),
                    is_special_name=True,
                ))

            def read(instance: Any, _name: str = name) -> Any:
                if instance is None:
                    raise AttributeError(f"Property '{_name}' needs an instance")
                return getattr(instance, _name)

            properties.append(PropertyDescriptor(
                name=name,
                flags=flags,
                declaring_type=ref,
                property_type=_type_ref(return_hint),
                can_read=attr.fget is not None,
                can_write=attr.fset is not None,
                accessors=accessors,
                getter=read,
            ))
        return properties
