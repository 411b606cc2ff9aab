"""Versioned schema loaders and validators."""

from preprod_engine.schemas.breakdown_v1 import dump_breakdown, load_breakdown, validate_breakdown

__all__ = [
    "load_breakdown",
    "dump_breakdown",
    "validate_breakdown",
]
