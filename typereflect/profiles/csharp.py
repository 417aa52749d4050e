"""
C# Language Profile

Renders declarations in C-family syntax:

    [System.ObsoleteAttribute(Message="Use Bar")]
    public sealed class Example.Foo
    : Object
    private Int64 Count = 42L;
    public String Name {get /* = "Bob" */;set;}
"""

from typereflect.profiles.base import LanguageProfile
from typereflect.schema import ConstructorDescriptor


class CSharpProfile(LanguageProfile):
    """C-family token table; literal notation uses the defaults."""

    name = "csharp"
    aliases = ("c#", "cs")

    line_comment = "//"
    annotation_delimiters = ("[", "]")

    keyword_class = "class"
    keyword_enum = "enum"
    keyword_value_type = "struct"
    keyword_interface = "interface"
    keyword_inherits = ":"
    keyword_implements = ":"
    keyword_multicast = "event"
    keyword_statement_terminator = ";"
    keyword_statement_separator = ","

    qualifier_public = "public"
    qualifier_family = "protected"
    qualifier_assembly = "internal"
    qualifier_private = "private"
    qualifier_static = "static"
    qualifier_final = "sealed"
    qualifier_abstract = "abstract"
    qualifier_virtual = "virtual"
    qualifier_literal = "const"

    def constructor_name(self, ctor: ConstructorDescriptor) -> str:
        # C# constructors are named after their type
        if ctor.declaring_type is not None:
            return ctor.declaring_type.name
        return ctor.name
