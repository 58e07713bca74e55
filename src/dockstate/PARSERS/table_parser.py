# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Parsers for the column-aligned tables printed by the runtime CLI.

Two strategies share one interface:

- DelimiterCollapseParser splits on runs of two or more spaces. It is lenient:
  rows that come out short are dropped instead of failing the listing.
- FixedOffsetParser slices each row at the header offsets, so values with
  embedded spaces (commands, statuses) survive intact. It fails fast when a
  header is missing.
"""
import logging
import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from ..exceptions import OutputParseError

logger = logging.getLogger(__name__)

TableRow = Dict[str, str]

_COLUMN_GAP = re.compile(r" {2,}")


class TableParser(ABC):
    """
    Turns a header line plus data lines into rows keyed by header name.
    """

    @abstractmethod
    def parse(self, text: str, expected_headers: Sequence[str]) -> List[TableRow]:
        """
        Parses tabular CLI output.

        :param text: Raw output, header line first.
        :param expected_headers: Column headers the caller relies on, in order.
        :return: One row per data line, in input order.
        """


class DelimiterCollapseParser(TableParser):
    """
    Splits rows on runs of 2+ spaces and keeps the first N tokens,
    N being the number of expected headers.
    """

    def parse(self, text: str, expected_headers: Sequence[str]) -> List[TableRow]:
        headers = list(expected_headers)
        rows: List[TableRow] = []

        lines = text.splitlines()
        for line_no, line in enumerate(lines[1:], start=2):
            if not line.strip():
                continue

            tokens = [token.strip() for token in _COLUMN_GAP.split(line)]
            tokens = [token for token in tokens if token]

            if len(tokens) < len(headers):
                logger.debug(
                    "Skipping line %d: %d of %d columns: %r",
                    line_no, len(tokens), len(headers), line,
                )
                continue

            rows.append(dict(zip(headers, tokens)))

        return rows


class FixedOffsetParser(TableParser):
    """
    Slices rows at the character offsets where each header starts.

    :param leading_column: Name for the text before the first expected header
        (e.g. "CONTAINER ID"). If None, that text is discarded.
    """

    def __init__(self, leading_column: Optional[str] = None):
        self.leading_column = leading_column

    def column_offsets(self, header_line: str, expected_headers: Sequence[str]) -> List[int]:
        """
        Finds where each expected header starts in the header line.

        :raises OutputParseError: If a header is missing or out of order.
        """
        offsets = []
        for header in expected_headers:
            offset = header_line.find(header)
            if offset == -1:
                raise OutputParseError(
                    "failed to parse output: missing column header",
                    {"header": header},
                )
            if offsets and offset <= offsets[-1]:
                raise OutputParseError(
                    "failed to parse output: column headers out of order",
                    {"header": header},
                )
            offsets.append(offset)
        return offsets

    def parse(self, text: str, expected_headers: Sequence[str]) -> List[TableRow]:
        headers = list(expected_headers)
        lines = text.splitlines()
        if not lines:
            raise OutputParseError("failed to parse output: no header line")

        offsets = self.column_offsets(lines[0], headers)
        bounds = list(zip(offsets, offsets[1:] + [None]))

        rows: List[TableRow] = []
        for line in lines[1:]:
            if not line.strip():
                continue

            row: TableRow = {}
            if self.leading_column is not None:
                row[self.leading_column] = line[:offsets[0]].strip()
            for header, (start, end) in zip(headers, bounds):
                row[header] = line[start:end].strip()
            rows.append(row)

        return rows
