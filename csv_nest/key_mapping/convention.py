"""Key convention for delimiter-and-index flattened column names."""

from __future__ import annotations


class KeyConvention:
    """Split flat column names into group, index and sub-field parts.

    A column such as ``company.0.name`` with ``delimiter="."`` and
    ``index_pos=1`` decomposes into the group key ``company``, the index
    ``0`` and the sub-field ``name``.
    """

    def __init__(self, delimiter: str = ".", index_pos: int = 1) -> None:
        super().__init__()
        if not delimiter:
            msg = "delimiter must not be empty"
            raise ValueError(msg)
        if index_pos < 1:
            msg = "index_pos must be at least 1"
            raise ValueError(msg)

        self.delimiter = delimiter
        self.index_pos = index_pos

    def split(self, key: str) -> tuple[str, int, str] | None:
        """Return ``(group, index, sub_field)`` for an array key, else None."""
        parts = key.split(self.delimiter)
        if len(parts) <= self.index_pos:
            return None

        index = parse_index(parts[self.index_pos])
        if index is None:
            return None

        group = self.delimiter.join(parts[: self.index_pos])
        sub_field = self.delimiter.join(parts[self.index_pos + 1 :])
        return group, index, sub_field

    def composite_key(self, group: str, index: int, sub_field: str) -> str:
        """Build the flat column name for one array entry's sub-field."""
        return self.delimiter.join((group, str(index), sub_field))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KeyConvention):
            return NotImplemented
        return (self.delimiter, self.index_pos) == (other.delimiter, other.index_pos)

    def __hash__(self) -> int:
        return hash((self.delimiter, self.index_pos))

    def __repr__(self) -> str:
        return f"KeyConvention(delimiter={self.delimiter!r}, index_pos={self.index_pos!r})"


def parse_index(segment: str) -> int | None:
    """Parse a key segment as a non-negative array index.

    Only ASCII digits are accepted, leading zeros included. Signs,
    underscores, whitespace and non-ASCII digits return None.
    """
    if not (segment.isascii() and segment.isdigit()):
        return None
    return int(segment)
