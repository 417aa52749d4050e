"""
Visual Basic Language Profile

Renders declarations in Basic-family syntax. Besides its own vocabulary,
this profile overrides two shapes:

    - constructors are always "Sub New"
    - methods read "Function Name (args) As Type", or "Sub Name (args)"
      when nothing is returned

and uses VB literal suffixes ("x"c, 1.5R, 42UI, ...).
"""

from typereflect.encoder import ValueKind
from typereflect.profiles.base import LanguageProfile
from typereflect.schema import ConstructorDescriptor, TypeRef

# Return types that make a method a Sub rather than a Function
VOID_TYPES = frozenset({"System.Void", "Void", "None", "NoneType"})


class VisualBasicProfile(LanguageProfile):
    """Basic-family token table."""

    name = "vb"
    aliases = ("visualbasic", "vb.net")

    line_comment = "'"
    annotation_delimiters = ("<", ">")

    keyword_class = "Class"
    keyword_enum = "Enum"
    keyword_value_type = "Structure"
    keyword_interface = "Interface"
    keyword_inherits = "Inherits"
    keyword_implements = "Implements"
    keyword_multicast = "Event"
    keyword_statement_terminator = ""
    keyword_statement_separator = ","

    qualifier_public = "Public"
    qualifier_family = "Protected"
    qualifier_assembly = "Friend"
    qualifier_private = "Private"
    qualifier_static = "Shared"
    qualifier_final = "NotOverridable"
    qualifier_abstract = "MustOverride"
    qualifier_virtual = "Overridable"
    qualifier_literal = "Const"

    literal_formats = {
        ValueKind.CHARACTER: '"{0}"c',
        ValueKind.DECIMAL: "{0}D",
        ValueKind.DOUBLE: "{0}R",
        ValueKind.SINGLE: "{0}F",
        ValueKind.UINT32: "{0}UI",
        ValueKind.OBJECT: "GetType({0})",
    }

    def constructor_name(self, ctor: ConstructorDescriptor) -> str:
        return "Sub New"

    def method_declaration(self, return_type: TypeRef, name: str, params: str) -> str:
        if return_type.full_name in VOID_TYPES:
            return f"Sub {name} {params}"
        return f"Function {name} {params} As {return_type}"
