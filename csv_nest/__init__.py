"""csv-nest - rebuild nested records from flat, delimiter-indexed CSV columns"""

from ._version import version as __version__
from .decoding import DEFAULT_RULES, STRING_TO_DATETIME, ConversionRule, Decoder
from .errors import CSVNestError, CSVReadError, DecodeError, EmptyBatchError
from .key_mapping import KeyConvention, assemble_all, assemble_record, infer_structure
from .parser import CSVOptions, CSVParser
from .readers import CSVReader, Template, TemplateKey, read_template


__all__ = [
    "DEFAULT_RULES",
    "STRING_TO_DATETIME",
    "CSVNestError",
    "CSVOptions",
    "CSVParser",
    "CSVReadError",
    "CSVReader",
    "ConversionRule",
    "DecodeError",
    "Decoder",
    "EmptyBatchError",
    "KeyConvention",
    "Template",
    "TemplateKey",
    "__version__",
    "assemble_all",
    "assemble_record",
    "infer_structure",
    "read_template",
]
