import pytest
from pathlib import Path
from statement_importer.categorization import InboundPattern, OutboundPattern, PatternCatalogue
from statement_importer.domain.models import RawEntry
from statement_importer.repositories.yaml_catalogue_repository import YamlCatalogueRepository

@pytest.fixture
def outbound_entry() -> RawEntry:
    """A single outbound statement line"""
    return RawEntry.from_fields(["20191101", "foo bar", "-191.60", "200.00"])

@pytest.fixture
def inbound_entry() -> RawEntry:
    """A single inbound statement line"""
    return RawEntry.from_fields(["20191102", "Salary ACME Ltd", "555.55", "755.55"])

@pytest.fixture
def books_pattern() -> OutboundPattern:
    return OutboundPattern(
        snippet="Fake Bookshop",
        category="books",
        assign_as_expense=True,
        assign_as_personal=True,
        require_confirmation=False,
    )

@pytest.fixture
def salary_pattern() -> InboundPattern:
    return InboundPattern(snippet="Salary", category="salary", assign_as_income=True)

@pytest.fixture
def catalogue(books_pattern, salary_pattern) -> PatternCatalogue:
    """Catalogue with one pattern per direction"""
    return PatternCatalogue(
        categories=["books", "salary"],
        inbound_patterns=[salary_pattern],
        outbound_patterns=[books_pattern],
    )

@pytest.fixture
def catalogue_path(tmp_path) -> Path:
    """Location for a catalogue file that doesn't exist yet"""
    return tmp_path / "catalogue.yml"

@pytest.fixture
def yaml_repository(catalogue_path) -> YamlCatalogueRepository:
    return YamlCatalogueRepository(catalogue_path)
