"""
Language Profile Interface

This module defines the contract a target syntax must satisfy: the bundle
of keyword, qualifier and delimiter tokens the renderer is parameterized
over. Swapping profiles changes only token substitution (plus, optionally,
the literal notation of encoded values); the rendering logic itself lives
in one place, `typereflect.renderer`.

Design Principles:
    1. Tokens are plain class attributes so a profile reads as a table
    2. Malformed profiles fail at registration, never mid-render
    3. Hooks (constructor name, method declaration) cover the few places a
       syntax differs in shape rather than in vocabulary

Usage Pattern:
    1. Subclass LanguageProfile and fill in every token
    2. Register an instance with a ProfileRegistry (validated on the way in)
    3. Look the profile up by name or alias and hand it to a NodeRenderer
"""

from abc import ABC, abstractmethod
from typing import Optional

from typereflect.encoder import ValueKind
from typereflect.schema import ConstructorDescriptor, TypeRef

# Every token a conforming profile must supply as a string
REQUIRED_TOKENS: tuple[str, ...] = (
    "line_comment",
    "keyword_class",
    "keyword_enum",
    "keyword_value_type",
    "keyword_interface",
    "keyword_inherits",
    "keyword_implements",
    "keyword_multicast",
    "keyword_statement_terminator",
    "keyword_statement_separator",
    "qualifier_public",
    "qualifier_family",
    "qualifier_assembly",
    "qualifier_private",
    "qualifier_static",
    "qualifier_final",
    "qualifier_abstract",
    "qualifier_virtual",
    "qualifier_literal",
)


class LanguageProfile(ABC):
    """
    Abstract base class for all target syntaxes.

    Subclasses must define:
        - name: Registry key (e.g., "csharp")
        - every token listed in REQUIRED_TOKENS
        - annotation_delimiters: (open, close) pair
        - constructor_name(): The token used in place of a constructor's name

    Subclasses may override:
        - aliases: Extra registry keys
        - inline_comment_delimiters: Used for probed property values
        - literal_formats: Per-kind literal notation layered over the defaults
        - method_declaration(): Shape of "<returnType> <name> (params)"

    Example implementation:
        class PseudoProfile(LanguageProfile):
            name = "pseudo"
            line_comment = "#"
            annotation_delimiters = ("@", "")
            keyword_class = "class"
            ...

            def constructor_name(self, ctor):
                return "init"
    """

    name: str = ""
    aliases: tuple[str, ...] = ()

    line_comment: str
    annotation_delimiters: tuple[str, str]

    keyword_class: str
    keyword_enum: str
    keyword_value_type: str
    keyword_interface: str
    keyword_inherits: str
    keyword_implements: str
    keyword_multicast: str
    keyword_statement_terminator: str
    keyword_statement_separator: str

    qualifier_public: str
    qualifier_family: str
    qualifier_assembly: str
    qualifier_private: str
    qualifier_static: str
    qualifier_final: str
    qualifier_abstract: str
    qualifier_virtual: str
    qualifier_literal: str

    inline_comment_delimiters: tuple[str, str] = ("/*", "*/")
    literal_formats: dict[ValueKind, str] = {}

    @abstractmethod
    def constructor_name(self, ctor: ConstructorDescriptor) -> str:
        """
        Token rendered in place of a constructor's name.

        Args:
            ctor: The constructor being rendered

        Returns:
            e.g. the declaring type's simple name, or "Sub New"
        """
        pass

    def method_declaration(self, return_type: TypeRef, name: str, params: str) -> str:
        """
        Shape of a method declaration after its qualifiers.

        Args:
            return_type: Declared return type
            name: Method name
            params: Parenthesized parameter list, e.g. "(Int32 a, String b)"

        Returns:
            The declaration text, "<returnType> <name> (params)" by default
        """
        return f"{return_type} {name} {params}"

    def missing_tokens(self) -> list[str]:
        """
        List the required tokens this profile fails to supply.

        Returns:
            Names of tokens that are missing or not strings; empty if valid
        """
        missing = [
            token for token in REQUIRED_TOKENS
            if not isinstance(getattr(self, token, None), str)
        ]
        for pair in ("annotation_delimiters", "inline_comment_delimiters"):
            value = getattr(self, pair, None)
            if (not isinstance(value, tuple) or len(value) != 2
                    or not all(isinstance(v, str) for v in value)):
                missing.append(pair)
        return missing

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class ProfileRegistry:
    """
    Registry of available language profiles.

    Usage:
        registry = ProfileRegistry()
        registry.register(CSharpProfile())
        registry.register(VisualBasicProfile())

        profile = registry.get("c#")
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._profiles: list[LanguageProfile] = []

    def register(self, profile: LanguageProfile) -> None:
        """
        Register a profile after checking it supplies every token.

        Args:
            profile: The profile instance to register

        Raises:
            ValueError: If the profile has no name or is missing tokens
        """
        if not profile.name:
            raise ValueError(f"Profile {type(profile).__name__} has no name")

        missing = profile.missing_tokens()
        if missing:
            raise ValueError(
                f"Profile '{profile.name}' is missing tokens: {', '.join(missing)}"
            )

        self._profiles.append(profile)

    def get_profiles(self) -> list[LanguageProfile]:
        """Get all registered profiles, in registration order."""
        return self._profiles.copy()

    def names(self) -> list[str]:
        """Get the primary names of all registered profiles."""
        return [p.name for p in self._profiles]

    def find(self, name: str) -> Optional[LanguageProfile]:
        """Look a profile up by name or alias (case-insensitive)."""
        key = name.lower()
        for profile in self._profiles:
            if key == profile.name.lower() or key in (a.lower() for a in profile.aliases):
                return profile
        return None

    def get(self, name: str) -> LanguageProfile:
        """
        Look a profile up by name or alias.

        Raises:
            ValueError: If no registered profile matches
        """
        profile = self.find(name)
        if profile is None:
            raise ValueError(
                f"Unknown language '{name}' (available: {', '.join(self.names())})"
            )
        return profile
