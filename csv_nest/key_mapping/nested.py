"""Nested record reconstruction from flattened CSV columns."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, MutableMapping

    from .convention import KeyConvention
    from .structure import StructureDescriptor


logger = logging.getLogger(__name__)

NestedRecord = dict[str, Any]
"""Group key to a scalar string or a list of sub-object dicts."""


def strip_quotes(records: Iterable[MutableMapping[str, str]]) -> None:
    """Remove every literal double quote from every value, in place."""
    for record in records:
        for key, value in record.items():
            record[key] = value.replace('"', "")


def _array_length(record: Mapping[str, str], convention: KeyConvention, group: str, sub_field: str) -> int:
    length = 0
    while convention.composite_key(group, length, sub_field) in record:
        length += 1
    return length


def _assemble_array(
    record: Mapping[str, str],
    convention: KeyConvention,
    group: str,
    sub_fields: tuple[str, ...],
) -> list[dict[str, str]]:
    # Length comes from the first sub-field only.
    length = _array_length(record, convention, group, sub_fields[0])
    entries: list[dict[str, str]] = [{} for _ in range(length)]

    for sub_field in sub_fields:
        index = 0
        while index < length:
            record_key = convention.composite_key(group, index, sub_field)
            if record_key not in record:
                # Later indices of this sub-field are left unset.
                break
            entries[index][sub_field] = record[record_key]
            index += 1

    return entries


def assemble_record(
    structure: StructureDescriptor,
    record: Mapping[str, str],
    convention: KeyConvention,
) -> NestedRecord:
    """Rebuild one flat record into its nested form.

    Scalars missing from ``record`` come back as ``""``. Array lengths are
    counted from the first sub-field; any other sub-field stops at its own
    first missing index, leaving later entries without that field.
    """
    nested: NestedRecord = {}
    for group, sub_fields in structure.items():
        if not sub_fields:
            nested[group] = record.get(group, "")
            continue
        nested[group] = _assemble_array(record, convention, group, sub_fields)
    return nested


def assemble_all(
    structure: StructureDescriptor,
    records: Iterable[Mapping[str, str]],
    convention: KeyConvention,
) -> list[NestedRecord]:
    """Rebuild a batch of records, preserving input order."""
    assembled = [assemble_record(structure, record, convention) for record in records]
    logger.debug("Assembled %d records", len(assembled))
    return assembled
