"""Convert flat CSV records into maps, JSON and typed objects."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable, MutableMapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from .decoding import DEFAULT_RULES, ConversionRule, Decoder
from .errors import EmptyBatchError
from .key_mapping import KeyConvention, NestedRecord, assemble_all, infer_structure, strip_quotes


logger = logging.getLogger(__name__)

_T = TypeVar("_T")

FlatRecord = MutableMapping[str, str]


@dataclass(frozen=True)
class CSVOptions:
    """Parser options.

    ``delimiter`` separates the segments of array column names and
    ``index_pos`` is the segment that holds the array index. With
    ``delimiter="-"`` and ``index_pos=1``, ``company-0-name`` is an array
    column while ``company-name-0`` is not. ``struct_tag`` names the
    dataclass field metadata key used by :meth:`CSVParser.to_struct`.
    """

    delimiter: str = "."
    index_pos: int = 1
    struct_tag: str = "json"

    def __post_init__(self) -> None:
        if not self.struct_tag:
            msg = "struct_tag must not be empty"
            raise ValueError(msg)
        _ = self.convention()

    def convention(self) -> KeyConvention:
        return KeyConvention(delimiter=self.delimiter, index_pos=self.index_pos)


class CSVParser:
    """Rebuild nested records from flat, delimiter-indexed CSV columns.

    The record structure is inferred once from the first record of each
    batch. Values of every record have their double quotes stripped in
    place before conversion.
    """

    def __init__(
        self,
        options: CSVOptions | None = None,
        *,
        json_encoder: Callable[[Any], str] = json.dumps,
        rules: Sequence[ConversionRule] | None = None,
    ) -> None:
        super().__init__()
        self.options = options if options is not None else CSVOptions()
        self._convention = self.options.convention()
        self._json_encoder = json_encoder
        self._decoder = Decoder(
            tag_name=self.options.struct_tag,
            rules=DEFAULT_RULES if rules is None else rules,
        )

    def to_map(self, records: Iterable[FlatRecord]) -> list[NestedRecord]:
        """Return one nested dict per record, in input order."""
        batch = records if isinstance(records, Sequence) else list(records)
        if not batch:
            msg = "cannot convert an empty batch of records"
            raise EmptyBatchError(msg)

        logger.debug("Converting batch of %d records", len(batch))
        strip_quotes(batch)
        structure = infer_structure(batch[0], self._convention)
        return assemble_all(structure, batch, self._convention)

    def to_json(self, records: Iterable[FlatRecord]) -> str:
        """Return the nested records as a JSON array."""
        return self._json_encoder(self.to_map(records))

    def to_struct(self, records: Iterable[FlatRecord], target: type[_T] | Any) -> _T:
        """Decode the nested records into ``target``, e.g. ``list[Employee]``."""
        return self._decoder.decode(self.to_map(records), target)
