"""CSV and SQL output.

Every miner writes a CSV next to its other output and appends one table to
the shared ``update.sql`` script. Values are preformatted with the helpers
here; :class:`SqlWriter` only lays out statements.
"""

import os
from typing import Iterable, Optional, TextIO

from data_miner.core.log import get_logger

logger = get_logger(__name__)

SECTION_RULE = "/* " + "=" * 74 + " */"
MAX_ROWS_PER_INSERT = 999


def csv_str(value: Optional[str]) -> Optional[str]:
    """Quote a CSV field. None (or the literal "None") gives None."""
    if value is None or value == "None":
        return None
    return '"' + str(value).replace('"', '""') + '"'


def db_str(value: Optional[str], treat_null_as_empty: bool = False) -> str:
    """Quote an SQL string literal."""
    if value is None or value == "None":
        return "''" if treat_null_as_empty else "null"
    return "'" + str(value).replace("'", "''") + "'"


def db_bool(value: bool) -> str:
    return "true" if value else "false"


def db_val(value) -> str:
    """Format an optional scalar for SQL."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return db_bool(value)
    return str(value)


def csv_row(values: Iterable) -> str:
    return ",".join("" if v is None else str(v) for v in values)


def write_csv(path: str, header: str, rows: Iterable[str]) -> int:
    """Write a CSV with a preformatted header line and rows. Returns the row count."""
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    count = 0
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(header + "\n")
        for row in rows:
            f.write(row + "\n")
            count += 1
    logger.debug("Wrote %d rows to %s", count, path)
    return count


class SqlWriterError(RuntimeError):
    """A writer call was made in the wrong state."""


class SqlWriter:
    """Writes an SQL update script: file -> section -> table -> rows.

    Each table is truncated then refilled with batched ``insert`` statements
    of at most 999 rows. Calls made out of order raise :class:`SqlWriterError`.
    """

    NONE = "none"
    IN_FILE = "in_file"
    IN_SECTION = "in_section"
    IN_TABLE = "in_table"

    def __init__(self, stream: TextIO, state: str = NONE):
        self.stream = stream
        self.state = state
        self._table: Optional[str] = None
        self._rows = 0

    @classmethod
    def for_section(cls, stream: TextIO) -> "SqlWriter":
        """A writer positioned inside a section, for text spliced in later
        with :meth:`write_section_body`."""
        return cls(stream, state=cls.IN_SECTION)

    def _ensure(self, state: str, caller: str) -> None:
        if self.state != state:
            raise SqlWriterError(
                f"[SqlWriter] {caller}: writer in state '{self.state}', expected '{state}'"
            )

    def _line(self, text: str = "") -> None:
        self.stream.write(text + "\n")

    def start_file(self) -> None:
        self._ensure(self.NONE, "start_file")
        self._line("set names utf8mb4;")
        self._line("start transaction;")
        self._line()
        self.state = self.IN_FILE

    def end_file(self) -> None:
        self._ensure(self.IN_FILE, "end_file")
        self._line("commit;")
        self.state = self.NONE

    def start_section(self, name: str) -> None:
        self._ensure(self.IN_FILE, "start_section")
        self._line(SECTION_RULE)
        self._line(f"-- {name}")
        self._line()
        self.state = self.IN_SECTION

    def end_section(self) -> None:
        self._ensure(self.IN_SECTION, "end_section")
        self._line()
        self.state = self.IN_FILE

    def start_table(self, name: str) -> None:
        self._ensure(self.IN_SECTION, "start_table")
        self._line(f"truncate table `{name}`;")
        self._table = name
        self._rows = 0
        self.state = self.IN_TABLE

    def end_table(self) -> None:
        self._ensure(self.IN_TABLE, "end_table")
        if self._rows > 0:
            self._line(";")
        self._table = None
        self._rows = 0
        self.state = self.IN_SECTION

    def write_row(self, data: str) -> None:
        """Append one row of preformatted, comma-separated SQL values."""
        self._ensure(self.IN_TABLE, "write_row")
        if self._rows == MAX_ROWS_PER_INSERT:
            self._line(";")
            self._rows = 0
        if self._rows == 0:
            self._line(f"insert into `{self._table}` values ")
        else:
            self._line(",")
        self._rows += 1
        self.stream.write(f"({data})")

    def write_section_body(self, text: str) -> None:
        """Copy SQL produced by a section writer into the current section."""
        self._ensure(self.IN_SECTION, "write_section_body")
        self.stream.write(text)
