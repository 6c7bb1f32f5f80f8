from abc import ABC, abstractmethod

from statement_importer.categorization.catalogue import PatternCatalogue

class CatalogueNotFoundError(FileNotFoundError):
    """Raised when the catalogue has not been initialised yet."""
    pass

class CatalogueRepository(ABC):
    """
    Abstract repository for catalogue persistence.

    The in-memory catalogue is the source of truth; the repository is a
    sink that is rewritten in full after every processed entry.
    """

    @abstractmethod
    def exists(self) -> bool:
        """
        Check if a persisted catalogue is present.

        Returns:
            True if `load` can be called
        """
        pass

    @abstractmethod
    def initialise(self) -> PatternCatalogue:
        """
        Persist the empty catalogue template.

        Returns:
            The empty catalogue that was written
        """
        pass

    @abstractmethod
    def load(self) -> PatternCatalogue:
        """
        Load the persisted catalogue.

        Returns:
            The catalogue

        Raises:
            CatalogueNotFoundError: If nothing has been persisted yet
            CatalogueFormatError: If the persisted data is malformed
        """
        pass

    @abstractmethod
    def save(self, catalogue: PatternCatalogue) -> None:
        """
        Replace the persisted catalogue with `catalogue`.

        Args:
            catalogue: Catalogue to write in full
        """
        pass

    def load_or_initialise(self) -> PatternCatalogue:
        """Load the catalogue, creating it from the template first if missing"""
        if not self.exists():
            return self.initialise()
        return self.load()
