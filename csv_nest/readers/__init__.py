"""Readers for CSV rows and JSON templates."""

from .rows import DEFAULT_TIMEOUT, CSVReader
from .template import Template, TemplateKey, read_template


__all__ = ["DEFAULT_TIMEOUT", "CSVReader", "Template", "TemplateKey", "read_template"]
