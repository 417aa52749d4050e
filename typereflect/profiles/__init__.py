"""
Language profiles for the supported target syntaxes.

Each profile is a table of the keywords, qualifiers and delimiters of one
target syntax. The renderer is parameterized over a profile and contains
no syntax-specific logic of its own.

Available Profiles:
    - CSharpProfile: C-family syntax ("csharp", "c#", "cs")
    - VisualBasicProfile: Basic-family syntax ("vb", "visualbasic", "vb.net")

Usage:
    from typereflect.profiles import create_profile_registry

    registry = create_profile_registry()
    profile = registry.get("vb")
"""

from typereflect.profiles.base import REQUIRED_TOKENS, LanguageProfile, ProfileRegistry
from typereflect.profiles.csharp import CSharpProfile
from typereflect.profiles.visualbasic import VisualBasicProfile


def create_profile_registry() -> ProfileRegistry:
    """Create a registry holding every shipped profile."""
    registry = ProfileRegistry()
    registry.register(CSharpProfile())
    registry.register(VisualBasicProfile())
    return registry


__all__ = [
    "CSharpProfile",
    "LanguageProfile",
    "ProfileRegistry",
    "REQUIRED_TOKENS",
    "VisualBasicProfile",
    "create_profile_registry",
]
