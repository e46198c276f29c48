"""Batch import orchestration and AI-assisted text structuring."""
from orderflow.processing.importer import BatchImporter, ImportSummary, process_import
from orderflow.processing.structuring import TextStructurer, structure_import_text

__all__ = [
    "BatchImporter",
    "ImportSummary",
    "TextStructurer",
    "process_import",
    "structure_import_text",
]
