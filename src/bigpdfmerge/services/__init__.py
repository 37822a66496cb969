"""
BigPdfMerge - Services Package

PDF backends and the asynchronous ingestion and export pipelines.
"""

from bigpdfmerge.services.backend import DocumentHandle, PdfBackend
from bigpdfmerge.services.export_service import ExportArtifact, ExportResult, export_selection
from bigpdfmerge.services.ingestion import IngestFailure, IngestResult, ingest_files

__all__ = [
    "DocumentHandle",
    "PdfBackend",
    "ExportArtifact",
    "ExportResult",
    "export_selection",
    "IngestFailure",
    "IngestResult",
    "ingest_files",
]
