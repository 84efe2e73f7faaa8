"""JSON template reader."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from csv_nest.decoding import Decoder


@dataclass(frozen=True)
class TemplateKey:
    """One template entry describing a column."""

    key: str = field(default="", metadata={"json": "key"})
    kind: str = field(default="", metadata={"json": "kind"})
    tag: str = field(default="", metadata={"json": "tag"})


@dataclass(frozen=True)
class Template:
    keys: tuple[TemplateKey, ...] = ()


def read_template(json_template: str, decoder: Decoder | None = None) -> Template:
    """Parse a JSON array of ``{"key", "kind", "tag"}`` objects into a Template."""
    data = json.loads(json_template)
    keys = (decoder or Decoder()).decode(data, list[TemplateKey])
    return Template(keys=tuple(keys))
