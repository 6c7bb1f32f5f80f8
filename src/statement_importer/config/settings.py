import os
from pathlib import Path
from typing import Optional

# Catalogue lives in the user's home directory unless overridden
CATALOGUE_FILENAME = ".bank_statement_importer.yml"
CATALOGUE_ENV_VAR = "STATEMENT_IMPORTER_CATALOGUE"

# Statement dates and the CLI start date
DATE_FORMAT = "%Y%m%d"


class ConfigLoader:
    """Resolve configuration locations with user overrides"""

    @staticmethod
    def default_catalogue_path() -> Path:
        """Catalogue path in the home directory"""
        return Path.home() / CATALOGUE_FILENAME

    @staticmethod
    def resolve_catalogue_path(override: Optional[Path] = None) -> Path:
        """
        Resolve the catalogue file with fallback: explicit path -> env var -> home

        Args:
            override: Path given on the command line, if any

        Returns:
            Path to the catalogue file (it may not exist yet)
        """
        if override is not None:
            return Path(override).expanduser()

        env_path = os.environ.get(CATALOGUE_ENV_VAR)
        if env_path:
            return Path(env_path).expanduser()

        return ConfigLoader.default_catalogue_path()
