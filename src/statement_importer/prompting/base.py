from abc import ABC, abstractmethod
from typing import Sequence

from statement_importer.categorization.patterns import OutboundPattern
from statement_importer.domain.enums import Sphere
from statement_importer.domain.models import RawEntry


class Prompter(ABC):
    """
    Abstract interface for the questions asked while classifying.

    Every method blocks until it has a valid answer; implementations
    re-ask on invalid input instead of raising. The session service only
    calls the questions that the entry's direction and earlier answers
    make relevant.
    """

    @abstractmethod
    def show_entry(self, entry: RawEntry) -> None:
        """Display the entry about to be classified"""
        pass

    @abstractmethod
    def ask_skip_duplicate(self, entry: RawEntry) -> bool:
        """
        Ask whether an already processed entry should be skipped.

        Returns:
            True to skip, False to process it again
        """
        pass

    @abstractmethod
    def ask_personal_override(self, pattern: OutboundPattern) -> bool:
        """
        Ask whether an entry matched by a pattern requiring confirmation is personal.

        Returns:
            True for personal, False for work
        """
        pass

    @abstractmethod
    def ask_category(self, known_categories: Sequence[str]) -> str:
        """
        Ask for a category.

        Args:
            known_categories: Categories already in the catalogue

        Returns:
            An existing category or the name of a new one
        """
        pass

    @abstractmethod
    def ask_transfer(self) -> bool:
        """Ask whether the entry is a transfer between accounts"""
        pass

    @abstractmethod
    def ask_sphere(self) -> Sphere:
        """Ask whether the entry is personal or work"""
        pass

    @abstractmethod
    def ask_create_pattern(self) -> bool:
        """Ask whether a pattern should be learned from the entry"""
        pass

    @abstractmethod
    def ask_snippet(self, description: str) -> str:
        """
        Ask for the snippet of a new pattern.

        Returns:
            A non-empty substring of the description
        """
        pass

    @abstractmethod
    def ask_require_confirmation(self, sphere: Sphere) -> bool:
        """
        Ask whether future matches must confirm the sphere.

        Returns:
            True if every match should ask again, False to always assign `sphere`
        """
        pass
