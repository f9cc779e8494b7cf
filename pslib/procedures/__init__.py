"""
Procedure registry module.

Named markup snippets written once into a document header and invoked
by name from shape markup.
"""

from pslib.procedures.registry import BUILTIN_NAMES, Procedure, ProcedureRegistry

__all__ = ["BUILTIN_NAMES", "Procedure", "ProcedureRegistry"]
