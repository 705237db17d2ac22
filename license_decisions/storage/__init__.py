"""
Storage layer for license decisions.

Components:
- codec: YAML (de)serialization of the operation log
- DecisionsFile: load/save a project's decisions file

Usage:
    from storage import DecisionsFile

    store = DecisionsFile({"decisions_file": {"path": "doc/dependency_decisions.yml"}})
    decisions = store.load()
    decisions.permit("MIT")
    store.save(decisions)
"""

from . import codec
from .decisions_file import DecisionsFile, DEFAULT_DECISIONS_PATH

__all__ = [
    "codec",
    "DecisionsFile",
    "DEFAULT_DECISIONS_PATH",
]
