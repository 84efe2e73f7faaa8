"""Structure inference from an example flat record."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Mapping

    from .convention import KeyConvention


logger = logging.getLogger(__name__)

StructureDescriptor = MappingProxyType[str, tuple[str, ...]]
"""Group key to ordered sub-field names; an empty tuple marks a scalar."""


def infer_structure(example: Mapping[str, str], convention: KeyConvention) -> StructureDescriptor:
    """Infer which columns are scalars and which are arrays of sub-objects.

    Group keys keep the first-seen order of ``example``'s keys and each
    array's sub-fields keep the order they were first seen in. A plain
    column that shares its name with an array group never clears the
    sub-fields collected for that group.
    """
    structure: dict[str, list[str]] = {}

    for key in example:
        split = convention.split(key)
        if split is None:
            _ = structure.setdefault(key, [])
            continue

        group, _index, sub_field = split
        sub_fields = structure.setdefault(group, [])
        if sub_field not in sub_fields:
            sub_fields.append(sub_field)

    arrays = sum(1 for sub_fields in structure.values() if sub_fields)
    logger.debug("Inferred %d scalar and %d array groups", len(structure) - arrays, arrays)

    return MappingProxyType({group: tuple(sub_fields) for group, sub_fields in structure.items()})
