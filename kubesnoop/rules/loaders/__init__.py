"""
Rule loaders package.

Reads and writes rule definitions in YAML or JSON files.
"""

from kubesnoop.rules.loaders.file_loader import ImportSummary, export_rules, import_rules, load_rules

__all__ = [
    "ImportSummary",
    "export_rules",
    "import_rules",
    "load_rules",
]
