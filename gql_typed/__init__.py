"""Typed GraphQL client generator.

Generate Python modules whose query builders and response wrappers track
the selected fields in the type system.
"""

__version__ = "0.1.0"
