import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from statement_importer.categorization.patterns import (
    InboundPattern,
    OutboundPattern,
    Pattern,
)
from statement_importer.domain.enums import Direction
from statement_importer.domain.models import RawEntry

logger = logging.getLogger(__name__)

CATEGORIES_KEY = "categories"
INBOUND_KEY = "inbound_patterns"
OUTBOUND_KEY = "outbound_patterns"


class CatalogueFormatError(ValueError):
    """Raised when persisted catalogue data has the wrong shape."""
    pass


@dataclass
class PatternCatalogue:
    """
    Learned categories and snippet patterns.

    Patterns are partitioned by direction and kept in the order they were
    learned. Lookups return the first matching pattern, so when two snippets
    both match a description the one learned earlier wins.

    Usage:
        # Fresh session
        catalogue = PatternCatalogue()

        # From persisted state
        catalogue = PatternCatalogue.load(yaml.safe_load(text))

        pattern = catalogue.find_pattern(entry)
        catalogue.learn_pattern(new_pattern)
        data = catalogue.export()
    """
    categories: List[str] = field(default_factory=list)
    inbound_patterns: List[InboundPattern] = field(default_factory=list)
    outbound_patterns: List[OutboundPattern] = field(default_factory=list)

    def patterns_for(self, direction: Direction) -> List[Pattern]:
        """Return the pattern bucket for a direction"""
        if direction == Direction.INBOUND:
            return self.inbound_patterns
        return self.outbound_patterns

    def find_pattern(self, entry: RawEntry) -> Optional[Pattern]:
        """
        Find the first stored pattern matching an entry.

        Args:
            entry: Entry whose description is searched

        Returns:
            The earliest learned matching pattern of the entry's direction,
            or None if nothing matched
        """
        for pattern in self.patterns_for(entry.direction):
            if pattern.matches(entry.description):
                return pattern

        return None

    def has_category(self, name: str) -> bool:
        return name in self.categories

    def add_category(self, name: str) -> None:
        """Append a category unless it is already known"""
        if name not in self.categories:
            self.categories.append(name)

    def learn_pattern(self, pattern: Pattern) -> None:
        """
        Append a pattern to its direction bucket.

        Identical snippets are not de-duplicated.
        """
        if isinstance(pattern, InboundPattern):
            self.inbound_patterns.append(pattern)
        elif isinstance(pattern, OutboundPattern):
            self.outbound_patterns.append(pattern)
        else:
            raise TypeError(f"{pattern!r} is not an InboundPattern or OutboundPattern")

    def export(self) -> Dict[str, Any]:
        """
        Serializable form of the catalogue.

        Returns:
            Mapping with keys in the order categories, inbound_patterns,
            outbound_patterns
        """
        return {
            CATEGORIES_KEY: list(self.categories),
            INBOUND_KEY: [p.to_dict() for p in self.inbound_patterns],
            OUTBOUND_KEY: [p.to_dict() for p in self.outbound_patterns],
        }

    @staticmethod
    def template() -> Dict[str, Any]:
        """Canonical empty-state mapping used to initialise a catalogue file"""
        return {
            CATEGORIES_KEY: [],
            INBOUND_KEY: [],
            OUTBOUND_KEY: [],
        }

    @classmethod
    def load(cls, data: Mapping[str, Any]) -> "PatternCatalogue":
        """
        Rebuild a catalogue from its serializable form.

        Args:
            data: Mapping as produced by `export()`

        Returns:
            PatternCatalogue with category and pattern order preserved

        Raises:
            CatalogueFormatError: If a section is missing or malformed
        """
        if not isinstance(data, Mapping):
            raise CatalogueFormatError(
                f"Catalogue must be a mapping, got {type(data).__name__}"
            )

        catalogue = cls()

        for name in _section(data, CATEGORIES_KEY):
            if not isinstance(name, str):
                raise CatalogueFormatError(f"Category names must be strings, got {name!r}")
            if catalogue.has_category(name):
                logger.warning("Ignoring duplicate category '%s' in catalogue", name)
                continue
            catalogue.add_category(name)

        for item in _section(data, INBOUND_KEY):
            catalogue.inbound_patterns.append(InboundPattern(
                snippet=_field(item, "snippet", str),
                category=_field(item, "category", str),
                assign_as_income=_field(item, "assign_as_income", bool),
            ))

        for item in _section(data, OUTBOUND_KEY):
            catalogue.outbound_patterns.append(OutboundPattern(
                snippet=_field(item, "snippet", str),
                category=_field(item, "category", str),
                assign_as_expense=_field(item, "assign_as_expense", bool),
                assign_as_personal=_field(item, "assign_as_personal", bool),
                require_confirmation=_field(item, "require_confirmation", bool),
            ))

        return catalogue

    def __repr__(self) -> str:
        return (
            f"PatternCatalogue({len(self.categories)} categories, "
            f"{len(self.inbound_patterns)} inbound, {len(self.outbound_patterns)} outbound)"
        )


def _section(data: Mapping[str, Any], key: str) -> List[Any]:
    if key not in data:
        raise CatalogueFormatError(f"Catalogue is missing the '{key}' section")

    section = data[key]
    # An empty YAML section (`key:`) loads as None
    if section is None:
        return []
    if not isinstance(section, list):
        raise CatalogueFormatError(f"'{key}' must be a list, got {type(section).__name__}")
    return section


def _field(item: Any, name: str, expected: type) -> Any:
    if not isinstance(item, Mapping):
        raise CatalogueFormatError(f"Pattern must be a mapping, got {item!r}")
    if name not in item:
        raise CatalogueFormatError(f"Pattern {dict(item)!r} is missing '{name}'")

    value = item[name]
    if not isinstance(value, expected):
        raise CatalogueFormatError(
            f"Pattern field '{name}' must be {expected.__name__}, got {value!r}"
        )
    return value
