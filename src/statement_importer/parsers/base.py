from abc import ABC, abstractmethod
from pathlib import Path
from typing import List
from statement_importer.domain.models import RawEntry

class StatementParseError(ValueError):
    """Raised when a statement file contains a malformed line."""
    pass

class StatementParser(ABC):
    """
    Abstract base class for all statement parsers.

    Each statement format gets its own concrete parser that
    implements this interface.
    """

    @abstractmethod
    def parse(self, filepath: Path | str) -> List[RawEntry]:
        """
        Parse a statement file and return its entries in file order.

        Args:
            filepath: Path to the statement file

        Returns:
            List of RawEntry objects

        Raises:
            FileNotFoundError: If file doesn't exist
            StatementParseError: If any line is malformed
        """
        pass

    @abstractmethod
    def validate_file(self, filepath: Path | str):
        """
        Validate that the file matches the expected format.

        Args:
            filepath: Path to the statement file

        Returns:
            Nothing if file is valid for this parser

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If file format is invalid
        """
        pass
