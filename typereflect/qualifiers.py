"""
TypeReflect Qualifier Assembly

Orders the qualifier tokens that apply to a declaration. The emission
order is fixed per declaration kind:

    type:        public, final (unless value type), abstract (unless interface)
    method-like: public, family, assembly, private, static, final,
                 then abstract OR virtual (abstract wins)
    field:       public, private, assembly, family,
                 then literal OR static (literal wins)

Parameter direction flags are not qualifiers in the usual sense, but they
are assembled the same way and live here too.
"""

from typing import Optional

from typereflect.profiles.base import LanguageProfile
from typereflect.schema import (
    FieldDescriptor,
    MemberDescriptor,
    MemberFlags,
    ParameterFlags,
    TypeDescriptor,
)

# Abbreviations in emission order; concatenated with no separator
PARAMETER_FLAG_ABBREVIATIONS: list[tuple[ParameterFlags, str]] = [
    (ParameterFlags.IN, "in"),
    (ParameterFlags.OUT, "out"),
    (ParameterFlags.LCID, "lcid"),
    (ParameterFlags.RETVAL, "retval"),
    (ParameterFlags.OPTIONAL, "optional"),
    (ParameterFlags.HAS_DEFAULT, "hasdefault"),
    (ParameterFlags.HAS_FIELD_MARSHAL, "hasfieldmarshal"),
    (ParameterFlags.RESERVED_MASK, "reservedmask"),
    (ParameterFlags.RESERVED3, "reserved3"),
    (ParameterFlags.RESERVED4, "reserved4"),
]


def format_qualifiers(tokens: list[str]) -> str:
    """Join qualifier tokens, each followed by a single space."""
    return "".join(f"{token} " for token in tokens)


def type_qualifiers(profile: LanguageProfile, type_desc: TypeDescriptor) -> list[str]:
    """
    Qualifiers of a type declaration.

    Args:
        profile: Active language profile
        type_desc: The type being declared

    Returns:
        Ordered qualifier tokens
    """
    tokens = []
    if type_desc.is_public:
        tokens.append(profile.qualifier_public)
    if type_desc.is_sealed and not type_desc.is_value_type:
        tokens.append(profile.qualifier_final)
    if type_desc.is_abstract and not type_desc.is_interface:
        tokens.append(profile.qualifier_abstract)
    return tokens


def method_qualifiers(
    profile: LanguageProfile,
    member: Optional[MemberDescriptor],
) -> list[str]:
    """
    Qualifiers of a method, constructor or accessor.

    At most one of abstract/virtual is emitted; abstract takes precedence.

    Args:
        profile: Active language profile
        member: The method-like member, or None when there is no accessor

    Returns:
        Ordered qualifier tokens (empty for None)
    """
    if member is None:
        return []

    tokens = []
    if member.has(MemberFlags.PUBLIC):
        tokens.append(profile.qualifier_public)
    if member.has(MemberFlags.FAMILY):
        tokens.append(profile.qualifier_family)
    if member.has(MemberFlags.ASSEMBLY):
        tokens.append(profile.qualifier_assembly)
    if member.has(MemberFlags.PRIVATE):
        tokens.append(profile.qualifier_private)
    if member.has(MemberFlags.STATIC):
        tokens.append(profile.qualifier_static)
    if member.has(MemberFlags.FINAL):
        tokens.append(profile.qualifier_final)
    if member.has(MemberFlags.ABSTRACT):
        tokens.append(profile.qualifier_abstract)
    elif member.has(MemberFlags.VIRTUAL):
        tokens.append(profile.qualifier_virtual)
    return tokens


def field_qualifiers(profile: LanguageProfile, member: FieldDescriptor) -> list[str]:
    """
    Qualifiers of a field.

    A constant is never also marked static: literal takes precedence.
    """
    tokens = []
    if member.has(MemberFlags.PUBLIC):
        tokens.append(profile.qualifier_public)
    if member.has(MemberFlags.PRIVATE):
        tokens.append(profile.qualifier_private)
    if member.has(MemberFlags.ASSEMBLY):
        tokens.append(profile.qualifier_assembly)
    if member.has(MemberFlags.FAMILY):
        tokens.append(profile.qualifier_family)
    if member.has(MemberFlags.LITERAL):
        tokens.append(profile.qualifier_literal)
    elif member.has(MemberFlags.STATIC):
        tokens.append(profile.qualifier_static)
    return tokens


def parameter_flags(attributes: ParameterFlags) -> str:
    """
    Abbreviate a parameter's direction/optionality flags.

    Example:
        >>> parameter_flags(ParameterFlags.OPTIONAL | ParameterFlags.HAS_DEFAULT)
        'optionalhasdefault'
    """
    return "".join(
        abbreviation
        for flag, abbreviation in PARAMETER_FLAG_ABBREVIATIONS
        if attributes & flag
    )
