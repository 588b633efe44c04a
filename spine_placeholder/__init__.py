"""Spine placeholder generator.

Reduces a Spine skeleton JSON to the structure needed for import and writes a
placeholder PNG for every attachment it references.
"""
from .generator import GenerationResult, GeneratorOptions, SpineInputError, run
from .minimal import extract_minimal_structure, is_complex_attachment
from .skins import collect_attachment_names, find_attachment_size

__version__ = "1.0.0"

__all__ = [
    "GenerationResult",
    "GeneratorOptions",
    "SpineInputError",
    "collect_attachment_names",
    "extract_minimal_structure",
    "find_attachment_size",
    "is_complex_attachment",
    "run",
]
