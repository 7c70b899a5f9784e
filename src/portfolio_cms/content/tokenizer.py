"""
Permissive CSV tokenizer for spreadsheet exports.

Published spreadsheets export CSV with quoted cells whenever a cell holds a
comma, a quote or a line break (multi-line markdown bodies are common). The
tokenizer follows those conventions and never raises: malformed quoting is
consumed on a best-effort basis.

Rules:
- Delimiter ``,``; record separators ``\\n``, ``\\r\\n`` (one separator) or a lone ``\\r``
- ``"`` enters quoted mode; inside quotes ``""`` is a literal quote
- Delimiters and separators inside quotes are kept verbatim
- Rows made only of blank/whitespace fields are discarded
- An unterminated quote swallows the rest of the input into the open field
- Line numbers count every physical line, including blank ones and line
  breaks inside quoted cells

Example:
    >>> parse_csv('slug,title\\na,"Alpha, Inc."\\n\\n')
    [['slug', 'title'], ['a', 'Alpha, Inc.']]
"""

from __future__ import annotations

QUOTE = '"'


class CsvTokenizer:
    """Single-pass CSV state machine."""

    def __init__(self, delimiter: str = ","):
        if len(delimiter) != 1 or delimiter in ('"', "\r", "\n"):
            raise ValueError(f"Invalid delimiter: {delimiter!r}")
        self.delimiter = delimiter

    def tokenize(self, text: str) -> list[list[str]]:
        """Split ``text`` into rows of raw (untrimmed) string fields."""
        return [fields for _, fields in self.tokenize_lines(text)]

    def tokenize_lines(self, text: str) -> list[tuple[int, list[str]]]:
        """Like :meth:`tokenize`, pairing each row with the physical line it starts on."""
        rows: list[tuple[int, list[str]]] = []
        row: list[str] = []
        field: list[str] = []
        in_quotes = False
        line = 1
        row_line = 1

        i = 0
        n = len(text)
        while i < n:
            ch = text[i]
            nxt = text[i + 1] if i + 1 < n else ""

            if ch == QUOTE:
                if in_quotes and nxt == QUOTE:
                    field.append(QUOTE)
                    i += 2
                    continue
                in_quotes = not in_quotes
            elif in_quotes:
                field.append(ch)
                if ch == "\n" or (ch == "\r" and nxt != "\n"):
                    line += 1
            elif ch == self.delimiter:
                row.append("".join(field))
                field = []
            elif ch in ("\r", "\n"):
                if ch == "\r" and nxt == "\n":
                    i += 1
                row.append("".join(field))
                field = []
                self._emit(rows, row_line, row)
                row = []
                line += 1
                row_line = line
            else:
                field.append(ch)
            i += 1

        row.append("".join(field))
        self._emit(rows, row_line, row)
        return rows

    @staticmethod
    def _emit(rows: list[tuple[int, list[str]]], line: int, row: list[str]) -> None:
        if any(cell.strip() for cell in row):
            rows.append((line, row))


def decode_text(data: str | bytes) -> str:
    """Decode feed bytes as UTF-8, dropping a leading BOM."""
    if isinstance(data, bytes):
        return data.decode("utf-8-sig", errors="replace")
    return data.removeprefix("\ufeff")


def parse_csv(text: str | bytes, delimiter: str = ",") -> list[list[str]]:
    """
    Tokenize CSV text (or UTF-8 bytes) into rows of fields.

    Never raises for malformed content. Ragged rows are returned as-is;
    missing trailing fields are filled by the normalizer.
    """
    return CsvTokenizer(delimiter).tokenize(decode_text(text))


def parse_csv_lines(text: str | bytes, delimiter: str = ",") -> list[tuple[int, list[str]]]:
    """:func:`parse_csv` with the 1-based source line each row starts on."""
    return CsvTokenizer(delimiter).tokenize_lines(decode_text(text))
