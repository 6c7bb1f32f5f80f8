"""
Decision logic turning user choices into a classification.

`classify` is a pure function: the caller (normally the session service)
collects exactly the choices the entry's direction requires and this module
decides which of the five classification variants applies. `categorise`
then turns that decision into the ledger entry recorded in the report.
"""
from dataclasses import dataclass
from typing import Any, Optional, Union

from statement_importer.categorization.patterns import (
    InboundPattern,
    OutboundPattern,
    Pattern,
    PatternOverride,
)
from statement_importer.domain.enums import Direction, EntryType, Sphere
from statement_importer.domain.models import CategorisedEntry, RawEntry


class MissingChoiceError(RuntimeError):
    """Raised when a choice required by the decision branch was never collected."""
    pass


@dataclass
class ClassificationChoices:
    """Answers collected for one entry. Unset fields stay None."""
    existing_pattern: Optional[Pattern] = None
    pattern_override: Optional[PatternOverride] = None
    category: Optional[str] = None
    transfer: Optional[bool] = None
    sphere: Optional[Sphere] = None
    create_pattern: Optional[bool] = None
    snippet: Optional[str] = None
    require_confirmation: Optional[bool] = None


@dataclass(frozen=True)
class ExistingPattern:
    pattern: Pattern
    pattern_override: Optional[PatternOverride] = None


@dataclass(frozen=True)
class NewPatternInbound:
    snippet: str
    category: str
    assign_as_income: bool


@dataclass(frozen=True)
class NewPatternOutbound:
    snippet: str
    category: str
    assign_as_expense: bool
    assign_as_personal: bool
    require_confirmation: bool


@dataclass(frozen=True)
class NoPatternInbound:
    category: str
    assign_as_income: bool


@dataclass(frozen=True)
class NoPatternOutbound:
    category: str
    assign_as_expense: bool
    assign_as_personal: bool


Classification = Union[
    ExistingPattern,
    NewPatternInbound,
    NewPatternOutbound,
    NoPatternInbound,
    NoPatternOutbound,
]


def _require(choices: ClassificationChoices, name: str) -> Any:
    value = getattr(choices, name)
    if value is None:
        raise MissingChoiceError(f"Choice '{name}' is required but was not collected")
    return value


def classify(direction: Direction, choices: ClassificationChoices) -> Classification:
    """
    Decide the classification for an entry.

    An existing pattern always wins and every other choice is ignored.
    Otherwise the direction and the create-pattern flag select the variant;
    a transfer is never income or expense.

    Args:
        direction: Direction of the raw entry
        choices: Answers collected from the user

    Returns:
        One of the five classification variants

    Raises:
        MissingChoiceError: If a field read by the selected branch is None

    Example:
        ```
        >>> classify(Direction.OUTBOUND, ClassificationChoices(
        ...     category="c", transfer=False, sphere=Sphere.WORK,
        ...     create_pattern=True, snippet="x", require_confirmation=True))
        NewPatternOutbound(snippet='x', category='c', assign_as_expense=True,
                           assign_as_personal=False, require_confirmation=True)
        ```
    """
    if choices.existing_pattern is not None:
        return ExistingPattern(choices.existing_pattern, choices.pattern_override)

    create_pattern = _require(choices, "create_pattern")

    if direction == Direction.INBOUND:
        if create_pattern:
            return NewPatternInbound(
                snippet=_require(choices, "snippet"),
                category=_require(choices, "category"),
                assign_as_income=not _require(choices, "transfer"),
            )
        return NoPatternInbound(
            category=_require(choices, "category"),
            assign_as_income=not _require(choices, "transfer"),
        )

    if create_pattern:
        return NewPatternOutbound(
            snippet=_require(choices, "snippet"),
            category=_require(choices, "category"),
            assign_as_expense=not _require(choices, "transfer"),
            assign_as_personal=_require(choices, "sphere") == Sphere.PERSONAL,
            require_confirmation=_require(choices, "require_confirmation"),
        )
    return NoPatternOutbound(
        category=_require(choices, "category"),
        assign_as_expense=not _require(choices, "transfer"),
        assign_as_personal=_require(choices, "sphere") == Sphere.PERSONAL,
    )


def category_of(classification: Classification) -> str:
    if isinstance(classification, ExistingPattern):
        return classification.pattern.category
    return classification.category


def pattern_to_learn(classification: Classification) -> Optional[Pattern]:
    """
    Pattern taught by a classification.

    Returns:
        A new pattern for NewPattern* variants, None otherwise
    """
    if isinstance(classification, NewPatternInbound):
        return InboundPattern(
            snippet=classification.snippet,
            category=classification.category,
            assign_as_income=classification.assign_as_income,
        )
    if isinstance(classification, NewPatternOutbound):
        return OutboundPattern(
            snippet=classification.snippet,
            category=classification.category,
            assign_as_expense=classification.assign_as_expense,
            assign_as_personal=classification.assign_as_personal,
            require_confirmation=classification.require_confirmation,
        )
    return None


def _inbound_entry(entry: RawEntry, category: str, assign_as_income: bool) -> CategorisedEntry:
    # Inbound patterns carry no sphere
    return CategorisedEntry(
        sphere=Sphere.PERSONAL,
        category=category,
        description=entry.description,
        amount=entry.amount,
        entry_type=EntryType.INCOME if assign_as_income else EntryType.TRANSFER,
        date=entry.date,
    )


def _outbound_entry(
    entry: RawEntry,
    category: str,
    assign_as_expense: bool,
    assign_as_personal: bool,
) -> CategorisedEntry:
    return CategorisedEntry(
        sphere=Sphere.PERSONAL if assign_as_personal else Sphere.WORK,
        category=category,
        description=entry.description,
        amount=entry.amount,
        entry_type=EntryType.EXPENSE if assign_as_expense else EntryType.TRANSFER,
        date=entry.date,
    )


def categorise(entry: RawEntry, classification: Classification) -> CategorisedEntry:
    """
    Build the ledger entry for a classified raw entry.

    An override on an existing pattern replaces the stored sphere for this
    entry only; the pattern itself is left untouched.

    Args:
        entry: The raw statement entry
        classification: Result of `classify` for that entry

    Returns:
        CategorisedEntry ready to be added to the activity report
    """
    if isinstance(classification, ExistingPattern):
        pattern = classification.pattern
        if isinstance(pattern, InboundPattern):
            return _inbound_entry(entry, pattern.category, pattern.assign_as_income)

        assign_as_personal = pattern.assign_as_personal
        if classification.pattern_override is not None:
            assign_as_personal = classification.pattern_override.is_personal
        return _outbound_entry(
            entry, pattern.category, pattern.assign_as_expense, assign_as_personal
        )

    if isinstance(classification, (NewPatternInbound, NoPatternInbound)):
        return _inbound_entry(entry, classification.category, classification.assign_as_income)

    if isinstance(classification, (NewPatternOutbound, NoPatternOutbound)):
        return _outbound_entry(
            entry,
            classification.category,
            classification.assign_as_expense,
            classification.assign_as_personal,
        )

    raise TypeError(f"Unknown classification {classification!r}")
