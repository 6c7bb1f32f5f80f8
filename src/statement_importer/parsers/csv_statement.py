import logging
from pathlib import Path
from typing import List

import pandas as pd

from statement_importer.domain.models import RawEntry, RawEntryParseError
from statement_importer.parsers.base import StatementParseError, StatementParser

logger = logging.getLogger(__name__)


class CsvStatementParser(StatementParser):
    """
    Parser for four-column CSV bank statement exports.

    Handles the format:
    - Header row (skipped, column names are not checked)
    - Columns in order: date (YYYYMMDD), description, signed amount, balance
    - Extra trailing columns are ignored

    Every cell is read as a raw string so the entry fingerprint is computed
    over exactly what the bank wrote.

    Example:
        parser = CsvStatementParser()
        entries = parser.parse('statements/november.csv')
    """

    REQUIRED_COLUMNS = 4

    def validate_file(self, filepath: Path | str) -> None:
        path = Path(filepath)

        if not path.exists():
            raise FileNotFoundError(f"File does not exist on path {path}")

        if path.suffix.lower() != ".csv":
            raise ValueError(f"File must be .csv, got {path.suffix}")

    def parse(self, filepath: Path | str) -> List[RawEntry]:
        """
        Parse a CSV statement.

        A single malformed line aborts the whole file; no partial list is
        returned. Blank lines are skipped but still counted, so error
        messages carry the real file line number.
        """
        self.validate_file(filepath)

        try:
            df = pd.read_csv(
                filepath,
                header=0,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=False,
            )
        except pd.errors.EmptyDataError:
            logger.warning("Statement %s is empty", filepath)
            return []
        except pd.errors.ParserError as e:
            raise StatementParseError(f"Failed to read {filepath}: {e}")

        self._validate_columns(df, filepath)

        entries = []
        for index, row in enumerate(df.itertuples(index=False, name=None)):
            # Header is line 1
            line_number = index + 2
            fields = ["" if pd.isna(value) else value for value in row]
            if not any(field.strip() for field in fields):
                continue
            try:
                entries.append(RawEntry.from_fields(fields))
            except RawEntryParseError as e:
                raise StatementParseError(f"{filepath}, line {line_number}: {e}")

        logger.debug("Parsed %d entries from %s", len(entries), filepath)
        return entries

    def _validate_columns(self, df: pd.DataFrame, filepath: Path | str) -> None:
        """Ensure the statement has enough columns"""
        if len(df.columns) < self.REQUIRED_COLUMNS:
            raise StatementParseError(
                f"{filepath}: expected {self.REQUIRED_COLUMNS} columns "
                f"(date, description, amount, balance), got {len(df.columns)}"
            )

    def __repr__(self) -> str:
        return "CsvStatementParser()"
