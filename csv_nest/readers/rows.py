"""Read CSV rows from a local file or an HTTP(S) URL."""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Self

import httpx

from csv_nest.errors import CSVReadError


if TYPE_CHECKING:
    from collections.abc import Iterable
    from types import TracebackType


logger = logging.getLogger(__name__)

# httpx has no end-to-end budget; the TLS handshake counts towards connect.
DEFAULT_TIMEOUT = httpx.Timeout(10.0, connect=5.0)


class CSVReader:
    """Read CSV data into flat records keyed by the header row."""

    def __init__(self, http_client: httpx.Client | None = None) -> None:
        """Create a reader.

        Parameters
        ----------
        http_client
            Optional client used by :meth:`from_url`. When omitted the reader
            creates one on first use, with a 10 s timeout and a 5 s connect
            timeout, and closes it in :meth:`close`.
        """
        super().__init__()
        self._client = http_client
        self._owns_client = http_client is None

    @property
    def http_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=DEFAULT_TIMEOUT)
        return self._client

    def read(self, lines: Iterable[str]) -> list[dict[str, str]]:
        """Read rows after the header, stripping whitespace from values."""
        reader = csv.reader(lines)
        records: list[dict[str, str]] = []
        try:
            header = next(reader, None)
            if header is None:
                return records

            for row in reader:
                if not row:
                    continue
                if len(row) != len(header):
                    msg = f"line {reader.line_num}: expected {len(header)} fields, got {len(row)}"
                    raise CSVReadError(msg)
                records.append({key: value.strip() for key, value in zip(header, row, strict=True)})
        except (csv.Error, UnicodeDecodeError) as error:
            msg = f"line {reader.line_num}: {error}"
            raise CSVReadError(msg) from error

        logger.debug("Read %d records", len(records))
        return records

    def from_path(self, file_path: str | Path) -> list[dict[str, str]]:
        """Read CSV records from a local file."""
        with Path(file_path).open(encoding="utf-8", newline="") as handle:
            return self.read(handle)

    def from_url(self, url: str) -> list[dict[str, str]]:
        """Fetch and read CSV records from a URL."""
        logger.debug("Fetching CSV from %s", url)
        response = self.http_client.get(url)
        if response.status_code != httpx.codes.OK:
            msg = f"unexpected HTTP status code {response.status_code} from {url}"
            raise CSVReadError(msg)
        return self.read(io.StringIO(response.text, newline=""))

    def close(self) -> None:
        """Close the HTTP client if this reader created it."""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()
