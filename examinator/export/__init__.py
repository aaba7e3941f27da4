"""Export functionality for quiz reviews."""

from .docx_generator import export_review_to_docx

__all__ = ["export_review_to_docx"]
