"""
Subpackage for reading issue datasets.

The `loader` module defines the row schema for GitHub issues and the
functions that read tab-separated issue files into DataFrames.
"""

from .loader import ISSUE_SCHEMA, Column, Schema, iter_issue_chunks, load_issues

__all__ = ["ISSUE_SCHEMA", "Column", "Schema", "iter_issue_chunks", "load_issues"]
