"""
TypeReflect - Pseudo-source rendering of type descriptions.

A small documentation/introspection renderer that turns a structured
description of a type (its base type, interfaces, fields, properties,
methods, constructors, events and attached annotations) into readable
pseudo-source text in a chosen target syntax.
"""

__version__ = "0.1.0"
