from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict

from statement_importer.domain.enums import Direction


@dataclass(frozen=True)
class Pattern(ABC):
    """
    Abstract base class for learned snippet patterns.

    A pattern maps a literal snippet of a transaction description to a
    category. Matching is a case-sensitive substring test and each pattern
    belongs to exactly one direction.

    Usage:
        ```
        pattern = OutboundPattern(
            snippet="Fake Bookshop",
            category="books",
            assign_as_expense=True,
            assign_as_personal=True,
            require_confirmation=False,
        )
        pattern.matches("CARD 1234 Fake Bookshop LONDON")  # True
        ```
    """
    snippet: str
    category: str

    @property
    @abstractmethod
    def direction(self) -> Direction:
        """Direction bucket this pattern is stored in"""
        pass

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """
        Serializable form of the pattern.

        Returns:
            Mapping with `snippet` and `category` first, then the flags
        """
        pass

    def matches(self, description: str) -> bool:
        """Check if the snippet occurs in the description"""
        return self.snippet in description


@dataclass(frozen=True)
class InboundPattern(Pattern):
    assign_as_income: bool

    @property
    def direction(self) -> Direction:
        return Direction.INBOUND

    def to_dict(self) -> Dict[str, Any]:
        return {
            "snippet": self.snippet,
            "category": self.category,
            "assign_as_income": self.assign_as_income,
        }

    def __repr__(self) -> str:
        return f"InboundPattern('{self.snippet}' -> {self.category})"


@dataclass(frozen=True)
class OutboundPattern(Pattern):
    assign_as_expense: bool
    assign_as_personal: bool
    require_confirmation: bool

    @property
    def direction(self) -> Direction:
        return Direction.OUTBOUND

    def to_dict(self) -> Dict[str, Any]:
        return {
            "snippet": self.snippet,
            "category": self.category,
            "assign_as_expense": self.assign_as_expense,
            "assign_as_personal": self.assign_as_personal,
            "require_confirmation": self.require_confirmation,
        }

    def __repr__(self) -> str:
        return f"OutboundPattern('{self.snippet}' -> {self.category})"


@dataclass(frozen=True)
class PatternOverride:
    """Flips the sphere of a matched pattern for a single entry"""
    is_personal: bool
