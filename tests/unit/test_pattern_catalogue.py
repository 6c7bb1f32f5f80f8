import pytest

from statement_importer.categorization import (
    CatalogueFormatError,
    InboundPattern,
    OutboundPattern,
    PatternCatalogue,
)
from statement_importer.domain.enums import Direction
from statement_importer.domain.models import RawEntry


def _outbound(snippet: str, category: str, **flags) -> OutboundPattern:
    return OutboundPattern(
        snippet=snippet,
        category=category,
        assign_as_expense=flags.get("assign_as_expense", True),
        assign_as_personal=flags.get("assign_as_personal", True),
        require_confirmation=flags.get("require_confirmation", False),
    )


@pytest.fixture
def matching_catalogue() -> PatternCatalogue:
    return PatternCatalogue(
        categories=[],
        inbound_patterns=[
            InboundPattern(snippet="one", category="foo", assign_as_income=True),
            InboundPattern(snippet="two", category="bar", assign_as_income=False),
        ],
        outbound_patterns=[
            _outbound("three", "baz"),
            _outbound("four", "buzz", assign_as_expense=False, assign_as_personal=False, require_confirmation=True),
        ],
    )


@pytest.mark.unit
class TestPatternMatching:
    """Test looking up patterns for entries"""

    def test_outbound_match(self, matching_catalogue: PatternCatalogue):
        entry = RawEntry.from_fields(["  20191101  ", "  foo three bar  ", "  -191.60  ", "  200.00  "])

        assert matching_catalogue.find_pattern(entry) == _outbound("three", "baz")

    def test_inbound_match(self, matching_catalogue: PatternCatalogue):
        entry = RawEntry.from_fields(["20191101", "foo one bar", "191.60", "200.00"])

        assert matching_catalogue.find_pattern(entry) == InboundPattern(
            snippet="one", category="foo", assign_as_income=True
        )

    def test_no_match(self, matching_catalogue: PatternCatalogue):
        outbound = RawEntry.from_fields(["20191101", "foo zzz bar", "-191.60", "200.00"])
        inbound = RawEntry.from_fields(["20191101", "foo zzz bar", "191.60", "200.00"])

        assert matching_catalogue.find_pattern(outbound) is None
        assert matching_catalogue.find_pattern(inbound) is None

    def test_only_searches_own_direction(self, matching_catalogue: PatternCatalogue):
        """'one' is an inbound snippet, so an outbound entry must not match it"""
        entry = RawEntry.from_fields(["20191101", "foo one bar", "-5.00", "0.00"])

        assert matching_catalogue.find_pattern(entry) is None

    def test_match_is_case_sensitive(self, matching_catalogue: PatternCatalogue):
        entry = RawEntry.from_fields(["20191101", "FOO THREE BAR", "-5.00", "0.00"])

        assert matching_catalogue.find_pattern(entry) is None

    def test_empty_catalogue(self):
        entry = RawEntry.from_fields(["20191101", "anything", "-5.00", "0.00"])

        assert PatternCatalogue().find_pattern(entry) is None

    def test_first_learned_pattern_wins(self):
        # Arrange
        catalogue = PatternCatalogue()
        first = _outbound("Coffee", "coffee")
        second = _outbound("Coffee House", "eating out")
        catalogue.learn_pattern(first)
        catalogue.learn_pattern(second)
        entry = RawEntry.from_fields(["20191101", "The Coffee House", "-3.20", "0.00"])

        # Act
        found = catalogue.find_pattern(entry)

        # Assert
        assert found is first


@pytest.mark.unit
class TestCatalogueMutation:
    """Test learning categories and patterns"""

    def test_add_category_preserves_order(self):
        catalogue = PatternCatalogue()

        catalogue.add_category("rent")
        catalogue.add_category("books")
        catalogue.add_category("coffee")

        assert catalogue.categories == ["rent", "books", "coffee"]

    def test_add_category_is_idempotent(self):
        catalogue = PatternCatalogue()

        catalogue.add_category("rent")
        catalogue.add_category("books")
        catalogue.add_category("rent")

        assert catalogue.categories == ["rent", "books"]
        assert catalogue.has_category("books")
        assert not catalogue.has_category("coffee")

    def test_learn_pattern_uses_direction_bucket(self, books_pattern, salary_pattern):
        catalogue = PatternCatalogue()

        catalogue.learn_pattern(books_pattern)
        catalogue.learn_pattern(salary_pattern)

        assert catalogue.outbound_patterns == [books_pattern]
        assert catalogue.inbound_patterns == [salary_pattern]
        assert catalogue.patterns_for(Direction.OUTBOUND) == [books_pattern]
        assert catalogue.patterns_for(Direction.INBOUND) == [salary_pattern]

    def test_learn_pattern_keeps_duplicate_snippets(self):
        catalogue = PatternCatalogue()

        catalogue.learn_pattern(_outbound("shop", "a"))
        catalogue.learn_pattern(_outbound("shop", "b"))

        assert [p.category for p in catalogue.outbound_patterns] == ["a", "b"]

    def test_learn_pattern_rejects_other_types(self):
        with pytest.raises(TypeError):
            PatternCatalogue().learn_pattern("shop")


@pytest.mark.unit
class TestCatalogueSerialization:
    """Test export/load of the persisted form"""

    def test_template(self):
        assert PatternCatalogue.template() == {
            "categories": [],
            "inbound_patterns": [],
            "outbound_patterns": [],
        }
        assert list(PatternCatalogue.template().keys()) == [
            "categories", "inbound_patterns", "outbound_patterns"
        ]

    def test_load_template_gives_empty_catalogue(self):
        assert PatternCatalogue.load(PatternCatalogue.template()) == PatternCatalogue()

    def test_load(self):
        # Arrange
        data = {
            "categories": ["foo", "bar"],
            "outbound_patterns": [
                {"snippet": "Three", "category": "baz", "assign_as_expense": True,
                 "assign_as_personal": True, "require_confirmation": False},
                {"snippet": "Four", "category": "buzz", "assign_as_expense": False,
                 "assign_as_personal": False, "require_confirmation": True},
            ],
            "inbound_patterns": [
                {"snippet": "OnE", "category": "foo", "assign_as_income": True},
                {"snippet": "tWo", "category": "bar", "assign_as_income": False},
            ],
        }

        # Act
        catalogue = PatternCatalogue.load(data)

        # Assert
        assert catalogue.categories == ["foo", "bar"]
        assert catalogue.inbound_patterns == [
            InboundPattern(snippet="OnE", category="foo", assign_as_income=True),
            InboundPattern(snippet="tWo", category="bar", assign_as_income=False),
        ]
        assert catalogue.outbound_patterns == [
            _outbound("Three", "baz"),
            _outbound("Four", "buzz", assign_as_expense=False, assign_as_personal=False, require_confirmation=True),
        ]

    def test_export(self, catalogue: PatternCatalogue):
        assert catalogue.export() == {
            "categories": ["books", "salary"],
            "inbound_patterns": [
                {"snippet": "Salary", "category": "salary", "assign_as_income": True},
            ],
            "outbound_patterns": [
                {"snippet": "Fake Bookshop", "category": "books", "assign_as_expense": True,
                 "assign_as_personal": True, "require_confirmation": False},
            ],
        }
        assert list(catalogue.export().keys()) == [
            "categories", "inbound_patterns", "outbound_patterns"
        ]

    def test_round_trip(self, matching_catalogue: PatternCatalogue):
        matching_catalogue.add_category("zeta")
        matching_catalogue.add_category("alpha")

        assert PatternCatalogue.load(matching_catalogue.export()) == matching_catalogue

    def test_export_is_a_copy(self, catalogue: PatternCatalogue):
        data = catalogue.export()
        data["categories"].append("mutated")

        assert catalogue.categories == ["books", "salary"]

    def test_load_missing_section(self):
        with pytest.raises(CatalogueFormatError, match="outbound_patterns"):
            PatternCatalogue.load({"categories": [], "inbound_patterns": []})

    def test_load_pattern_missing_field(self):
        data = PatternCatalogue.template()
        data["inbound_patterns"] = [{"snippet": "x", "category": "y"}]

        with pytest.raises(CatalogueFormatError, match="assign_as_income"):
            PatternCatalogue.load(data)

    def test_load_wrong_field_type(self):
        data = PatternCatalogue.template()
        data["inbound_patterns"] = [{"snippet": "x", "category": "y", "assign_as_income": "yes"}]

        with pytest.raises(CatalogueFormatError):
            PatternCatalogue.load(data)

    def test_load_non_mapping(self):
        with pytest.raises(CatalogueFormatError):
            PatternCatalogue.load(["categories"])

    def test_load_empty_section(self):
        """A bare `categories:` key in YAML loads as None"""
        data = {"categories": None, "inbound_patterns": None, "outbound_patterns": None}

        assert PatternCatalogue.load(data) == PatternCatalogue()

    def test_load_drops_duplicate_categories(self):
        data = PatternCatalogue.template()
        data["categories"] = ["rent", "books", "rent"]

        assert PatternCatalogue.load(data).categories == ["rent", "books"]
