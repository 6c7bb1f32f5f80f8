"""
Pattern catalogue and classification engine.

Learns snippet patterns from user answers and classifies statement
entries into a personal/work ledger.

Quick Start:
    >>> from statement_importer.categorization import PatternCatalogue, classify
    >>>
    >>> catalogue = PatternCatalogue()
    >>> pattern = catalogue.find_pattern(entry)
    >>> classification = classify(entry.direction, choices)
"""
from statement_importer.categorization.catalogue import CatalogueFormatError, PatternCatalogue
from statement_importer.categorization.classifier import (
    Classification,
    ClassificationChoices,
    ExistingPattern,
    MissingChoiceError,
    NewPatternInbound,
    NewPatternOutbound,
    NoPatternInbound,
    NoPatternOutbound,
    categorise,
    category_of,
    classify,
    pattern_to_learn,
)
from statement_importer.categorization.patterns import (
    InboundPattern,
    OutboundPattern,
    Pattern,
    PatternOverride,
)

__all__ = [
    "CatalogueFormatError",
    "PatternCatalogue",
    "Classification",
    "ClassificationChoices",
    "ExistingPattern",
    "MissingChoiceError",
    "NewPatternInbound",
    "NewPatternOutbound",
    "NoPatternInbound",
    "NoPatternOutbound",
    "categorise",
    "category_of",
    "classify",
    "pattern_to_learn",
    "InboundPattern",
    "OutboundPattern",
    "Pattern",
    "PatternOverride",
]
