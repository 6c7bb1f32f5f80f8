import logging
from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from statement_importer.categorization import (
    ClassificationChoices,
    PatternCatalogue,
    categorise,
    category_of,
    classify,
    pattern_to_learn,
)
from statement_importer.categorization.patterns import OutboundPattern, Pattern, PatternOverride
from statement_importer.domain.enums import Direction, Sphere
from statement_importer.domain.models import CategorisedEntry, RawEntry, parse_statement_date
from statement_importer.parsers.base import StatementParser
from statement_importer.parsers.csv_statement import CsvStatementParser
from statement_importer.prompting.base import Prompter
from statement_importer.repositories.base import CatalogueRepository
from statement_importer.services.models import ActivityReport

logger = logging.getLogger(__name__)


def parse_start_date(text: str) -> date:
    """Parse the YYYYMMDD start date given on the command line"""
    return parse_statement_date(text.strip())


def month_boundaries(start_date: date) -> Tuple[date, date]:
    """
    Date window covering the calendar month of `start_date`.

    Args:
        start_date: First day to include (any day of the month)

    Returns:
        (start_date, end_exclusive) where end_exclusive is the first day
        of the following month
    """
    if start_date.month == 12:
        end_exclusive = date(start_date.year + 1, 1, 1)
    else:
        end_exclusive = date(start_date.year, start_date.month + 1, 1)
    return start_date, end_exclusive


def collect_entries(
    directory: Path | str,
    start_date: date,
    parser: Optional[StatementParser] = None,
) -> List[RawEntry]:
    """
    Read every CSV statement in a directory and keep one month of entries.

    Files are read in sorted name order and entries keep their file order.

    Args:
        directory: Directory containing the statement files
        start_date: First day of the window; the window ends before the
            first day of the following month
        parser: Parser to use, defaults to CsvStatementParser

    Returns:
        Entries with start_date <= date < end of month

    Raises:
        FileNotFoundError: If the directory doesn't exist
        StatementParseError: If any statement line is malformed
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Input directory not found: {directory}")

    parser = parser or CsvStatementParser()
    start, end_exclusive = month_boundaries(start_date)

    entries: List[RawEntry] = []
    files = sorted(p for p in directory.iterdir() if p.is_file() and p.suffix.lower() == ".csv")
    for filepath in files:
        parsed = parser.parse(filepath)
        in_window = [e for e in parsed if start <= e.date < end_exclusive]
        logger.info(
            "Read %s: %d entries, %d in window", filepath.name, len(parsed), len(in_window)
        )
        entries.extend(in_window)

    return entries


class ClassificationSession:
    """
    Drives the per-entry classification workflow for one run.

    For every entry:
    1. Ask before re-processing a statement line already seen this run
    2. Use a matching pattern (asking for the sphere if it needs confirmation)
       or collect the answers needed to classify it
    3. Record the categorised entry in the report
    4. Learn the new category and pattern, then persist the catalogue

    The catalogue and the report are owned by the session; nothing is
    shared between sessions.

    Usage:
        session = ClassificationSession(catalogue, repository, prompter)
        report = session.run(entries)
    """

    def __init__(
        self,
        catalogue: PatternCatalogue,
        repository: CatalogueRepository,
        prompter: Prompter,
        report: Optional[ActivityReport] = None,
    ):
        self.catalogue = catalogue
        self.repository = repository
        self.prompter = prompter
        self.report = report if report is not None else ActivityReport()

    def run(self, entries: Iterable[RawEntry]) -> ActivityReport:
        """Process entries in order and return the report"""
        for entry in entries:
            self.process(entry)
        return self.report

    def process(self, entry: RawEntry) -> Optional[CategorisedEntry]:
        """
        Classify, record and learn from a single entry.

        Args:
            entry: The raw statement entry

        Returns:
            The recorded entry, or None if the user skipped a duplicate
        """
        self.prompter.show_entry(entry)

        if self.report.contains(entry.fingerprint):
            if self.prompter.ask_skip_duplicate(entry):
                logger.info("Skipped duplicate %r", entry)
                return None

        choices = self._collect_choices(entry)
        classification = classify(entry.direction, choices)
        categorised = categorise(entry, classification)

        self.report.add(categorised, entry.fingerprint)

        self.catalogue.add_category(category_of(classification))
        new_pattern = pattern_to_learn(classification)
        if new_pattern is not None:
            self.catalogue.learn_pattern(new_pattern)
            logger.info("Learned %r", new_pattern)

        self.repository.save(self.catalogue)

        return categorised

    def _collect_choices(self, entry: RawEntry) -> ClassificationChoices:
        """
        Ask exactly the questions `classify` needs for this entry.

        Returns:
            Choices with every field required by the entry's branch set
        """
        pattern = self.catalogue.find_pattern(entry)
        if pattern is not None:
            logger.info("Automatically mapped %r to %s", entry, pattern.category)
            return ClassificationChoices(
                existing_pattern=pattern,
                pattern_override=self._ask_override(pattern),
            )

        choices = ClassificationChoices()
        choices.category = self.prompter.ask_category(list(self.catalogue.categories))
        choices.transfer = self.prompter.ask_transfer()

        if entry.direction == Direction.OUTBOUND:
            # Transfers are not split by sphere
            choices.sphere = Sphere.PERSONAL if choices.transfer else self.prompter.ask_sphere()

        choices.create_pattern = self.prompter.ask_create_pattern()
        if choices.create_pattern:
            choices.snippet = self.prompter.ask_snippet(entry.description)
            if entry.direction == Direction.OUTBOUND and not choices.transfer:
                choices.require_confirmation = self.prompter.ask_require_confirmation(choices.sphere)
            else:
                choices.require_confirmation = False

        return choices

    def _ask_override(self, pattern: Pattern) -> Optional[PatternOverride]:
        if isinstance(pattern, OutboundPattern) and pattern.require_confirmation:
            return PatternOverride(is_personal=self.prompter.ask_personal_override(pattern))
        return None
