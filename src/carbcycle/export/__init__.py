"""Output formatters and spreadsheet export."""

from carbcycle.export.formatters import JSONFormatter, MarkdownFormatter, TableFormatter
from carbcycle.export.spreadsheet import export_targets_csv, export_xlsx

__all__ = [
    "JSONFormatter",
    "MarkdownFormatter",
    "TableFormatter",
    "export_targets_csv",
    "export_xlsx",
]
