"""Parsers for dump text formats."""

from dumpviewer.parsing.indented import IndentedDumpParser, parse_indented_dump
from dumpviewer.parsing.labels import clean_label, stylize_label

__all__ = [
    "IndentedDumpParser",
    "parse_indented_dump",
    "clean_label",
    "stylize_label",
]
