"""
pdf_document_classifier sorts PDF business documents by their contents.

Text is rebuilt from the PDF layout, a language model infers the document
attributes, and each file is copied into a folder per document type with
a CSV manifest of the renames.
"""

__all__ = [
    "lines",
    "schema",
    "agents",
    "preprocess",
    "orchestrator",
    "config",
]
