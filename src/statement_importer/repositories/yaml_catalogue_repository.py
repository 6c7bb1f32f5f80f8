import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict

import yaml

from statement_importer.categorization.catalogue import CatalogueFormatError, PatternCatalogue
from statement_importer.repositories.base import CatalogueNotFoundError, CatalogueRepository

logger = logging.getLogger(__name__)


class YamlCatalogueRepository(CatalogueRepository):
    """
    Catalogue repository backed by a human-editable YAML file.

    Every save rewrites the whole file through a temporary file in the same
    directory and swaps it in with `os.replace`, so a reader sees either the
    previous or the new catalogue, never a partial one.

    Example:
        repository = YamlCatalogueRepository(Path.home() / ".bank_statement_importer.yml")
        catalogue = repository.load_or_initialise()
        catalogue.add_category("books")
        repository.save(catalogue)
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def initialise(self) -> PatternCatalogue:
        self._write(PatternCatalogue.template())
        logger.info("Catalogue created at %s", self.path)
        return PatternCatalogue()

    def load(self) -> PatternCatalogue:
        if not self.path.exists():
            raise CatalogueNotFoundError(f"Catalogue not found: {self.path}")

        with open(self.path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise CatalogueFormatError(f"Could not parse catalogue {self.path}: {e}")

        if data is None:
            raise CatalogueFormatError(f"Catalogue {self.path} is empty")

        catalogue = PatternCatalogue.load(data)
        logger.debug("Loaded %r from %s", catalogue, self.path)
        return catalogue

    def save(self, catalogue: PatternCatalogue) -> None:
        self._write(catalogue.export())
        logger.debug("Saved %r to %s", catalogue, self.path)

    def _write(self, data: Dict[str, Any]) -> None:
        """
        Atomically replace the catalogue file.

        Args:
            data: Serializable catalogue mapping
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.",
            suffix=".tmp",
            dir=self.path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                yaml.safe_dump(
                    data,
                    f,
                    sort_keys=False,
                    default_flow_style=False,
                    allow_unicode=True,
                )
            os.replace(tmp_name, self.path)
        except Exception:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise

    def __repr__(self) -> str:
        return f"YamlCatalogueRepository('{self.path}')"
