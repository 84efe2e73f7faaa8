"""Key convention, structure inference and nested reconstruction."""

from .convention import KeyConvention, parse_index
from .nested import NestedRecord, assemble_all, assemble_record, strip_quotes
from .structure import StructureDescriptor, infer_structure


__all__ = [
    "KeyConvention",
    "NestedRecord",
    "StructureDescriptor",
    "assemble_all",
    "assemble_record",
    "infer_structure",
    "parse_index",
    "strip_quotes",
]
