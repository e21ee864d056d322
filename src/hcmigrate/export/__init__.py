"""Tabular export of extracted articles."""

from .exporter import HEADER, ExportReport, collect_documents, export_directory

__all__ = ["ExportReport", "HEADER", "collect_documents", "export_directory"]
