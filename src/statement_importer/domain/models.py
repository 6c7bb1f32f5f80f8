import hashlib
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from datetime import date, datetime
from typing import Sequence

from statement_importer.config.settings import DATE_FORMAT
from statement_importer.domain.enums import Direction, EntryType, Sphere

_DATE_FIELD = re.compile(r"^\d{8}$")


class RawEntryParseError(ValueError):
    """Raised when a statement line cannot be turned into a RawEntry."""
    pass


def parse_statement_date(text: str) -> date:
    """
    Parse a strict YYYYMMDD date.

    Args:
        text: Date string, already trimmed

    Returns:
        Parsed date

    Raises:
        RawEntryParseError: If the text is not eight digits or not a calendar date
    """
    if not _DATE_FIELD.match(text):
        raise RawEntryParseError(f"Date must be YYYYMMDD, got '{text}'")

    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError as e:
        raise RawEntryParseError(f"Invalid date '{text}': {e}")


def _parse_decimal(text: str, field_name: str) -> Decimal:
    try:
        value = Decimal(text)
    except InvalidOperation:
        raise RawEntryParseError(f"Could not parse {field_name} '{text}'")

    if not value.is_finite():
        raise RawEntryParseError(f"{field_name.capitalize()} must be finite, got '{text}'")

    return value


@dataclass(frozen=True)
class RawEntry:
    """
    One normalised statement line.

    The fingerprint is derived from the raw source strings, so the same
    line always hashes the same way regardless of surrounding whitespace.
    Use `RawEntry.from_fields` to build one from a statement row.
    """
    date: date
    description: str
    amount: Decimal
    direction: Direction
    balance: Decimal
    fingerprint: str

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> "RawEntry":
        """
        Build an entry from the four raw statement fields.

        Args:
            fields: date (YYYYMMDD), description, signed amount, balance.
                Extra trailing fields are ignored.

        Returns:
            A RawEntry with absolute amount and derived direction

        Raises:
            RawEntryParseError: If a field is missing or malformed
        """
        if len(fields) < 4:
            raise RawEntryParseError(
                f"Expected 4 fields (date, description, amount, balance), got {len(fields)}"
            )

        date_str, description, amount_str, balance_str = (
            str(field).strip() for field in fields[:4]
        )

        fingerprint = cls.compute_fingerprint(date_str, description, amount_str, balance_str)

        entry_date = parse_statement_date(date_str)
        signed_amount = _parse_decimal(amount_str, "amount")
        balance = _parse_decimal(balance_str, "balance")

        # Zero counts as money leaving the account
        direction = Direction.OUTBOUND if signed_amount <= 0 else Direction.INBOUND

        return cls(
            date=entry_date,
            description=description,
            amount=abs(signed_amount),
            direction=direction,
            balance=balance,
            fingerprint=fingerprint,
        )

    @staticmethod
    def compute_fingerprint(*raw_fields: str) -> str:
        """SHA-256 hex digest over the trimmed raw fields, in order."""
        hasher = hashlib.sha256()
        for field in raw_fields:
            hasher.update(field.encode("utf-8"))
        return hasher.hexdigest()

    def summary(self) -> str:
        return f"{self.date.isoformat()} {self.direction.value} {self.description} {self.amount} {self.balance}"

    def __repr__(self):
        sign = "+" if self.direction == Direction.INBOUND else "-"
        return f"RawEntry({self.date}, {self.description[:30]}, {sign}{self.amount})"


@dataclass(frozen=True)
class CategorisedEntry:
    """A classified statement line, as recorded in the activity report"""
    sphere: Sphere
    category: str
    description: str
    amount: Decimal
    entry_type: EntryType
    date: date

    def __repr__(self):
        return (
            f"CategorisedEntry({self.date}, {self.sphere.value}/{self.category}, "
            f"{self.entry_type.value}, {self.amount})"
        )
