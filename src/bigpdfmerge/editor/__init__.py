"""
BigPdfMerge - Page Editor Core

The editing session: an ordered sequence of page records and the
selection, ordering and removal operations that rewrite it.

Main Components:
- PageStore: Ordered page sequence owned by one editing session
- PageRecord: One page of one source, with its provenance
- page_operations: Selection and ordering functions over a PageStore
"""

from bigpdfmerge.editor.page_model import PageRecord, PageStore, PreviewBlob, SourceFile
from bigpdfmerge.editor.page_operations import AreaSelectMode

__all__ = ["AreaSelectMode", "PageRecord", "PageStore", "PreviewBlob", "SourceFile"]
