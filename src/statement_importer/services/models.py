"""
Service layer models - the ledger built during a session.

These models aggregate classified entries for reporting; they never touch
the raw statement data or the catalogue.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from statement_importer.domain.enums import EntryType, Sphere
from statement_importer.domain.models import CategorisedEntry


def _sum_amounts(entries: Iterable[CategorisedEntry]) -> Decimal:
    return sum((e.amount for e in entries), Decimal("0"))


@dataclass
class ActivityReport:
    """
    Append log of classified entries for one run.

    Each entry is stored with the fingerprint of the statement line it came
    from. Duplicates are not rejected here: the session asks the user before
    re-processing a line it has already seen.
    """
    entries: List[CategorisedEntry] = field(default_factory=list)
    source_fingerprints: List[str] = field(default_factory=list)

    def add(self, entry: CategorisedEntry, source_fingerprint: str) -> None:
        self.entries.append(entry)
        self.source_fingerprints.append(source_fingerprint)

    def contains(self, fingerprint: str) -> bool:
        """Check if a statement line has already been recorded"""
        return fingerprint in self.source_fingerprints

    def total(self, sphere: Optional[Sphere], entry_type: EntryType) -> Decimal:
        """
        Sum of amounts for a sphere and entry type.

        Args:
            sphere: Sphere to include, or None for both
            entry_type: Entry type to include

        Returns:
            Exact decimal total, Decimal("0") when nothing matches
        """
        return _sum_amounts(
            e for e in self.entries
            if (sphere is None or e.sphere == sphere) and e.entry_type == entry_type
        )

    def total_personal(self) -> Decimal:
        """Total personal expenses"""
        return self.total(Sphere.PERSONAL, EntryType.EXPENSE)

    def total_work(self) -> Decimal:
        """Total work expenses"""
        return self.total(Sphere.WORK, EntryType.EXPENSE)

    def total_income(self) -> Decimal:
        return self.total(None, EntryType.INCOME)

    def total_transfers(self) -> Decimal:
        return self.total(None, EntryType.TRANSFER)

    def __len__(self) -> int:
        return len(self.entries)

    def __str__(self) -> str:
        "Human-readable summary"
        lines = [
            f"Activity report: {len(self.entries)} entries",
            f" Personal expenses: {self.total_personal():,.2f}",
            f" Work expenses: {self.total_work():,.2f}",
            f" Income: {self.total_income():,.2f}",
            f" Transfers: {self.total_transfers():,.2f}",
        ]
        return "\n".join(lines)


@dataclass(frozen=True)
class CategoryGroup:
    """Entries of one category within one sphere"""
    category: str
    sphere: Sphere
    entries: Tuple[CategorisedEntry, ...]

    def _total(self, entry_type: EntryType) -> Decimal:
        return _sum_amounts(e for e in self.entries if e.entry_type == entry_type)

    def total_expenses(self) -> Decimal:
        return self._total(EntryType.EXPENSE)

    def total_income(self) -> Decimal:
        return self._total(EntryType.INCOME)

    def total_transfers(self) -> Decimal:
        return self._total(EntryType.TRANSFER)


@dataclass(frozen=True)
class CategorisedActivityReport:
    """
    Read-only view of an activity report grouped by category and sphere.

    Groups follow the catalogue's category order, personal before work.
    Empty (category, sphere) pairs produce no group.
    """
    groups: Tuple[CategoryGroup, ...]

    @classmethod
    def build(
        cls,
        report: ActivityReport,
        known_categories: Iterable[str],
    ) -> "CategorisedActivityReport":
        """
        Group a report's entries.

        Args:
            report: The activity report to view
            known_categories: Categories in catalogue order. Entries whose
                category is not listed do not appear in any group.

        Returns:
            CategorisedActivityReport referencing the report's entries
        """
        groups: List[CategoryGroup] = []

        for category in known_categories:
            in_category = [e for e in report.entries if e.category == category]
            for sphere in (Sphere.PERSONAL, Sphere.WORK):
                entries = tuple(e for e in in_category if e.sphere == sphere)
                if entries:
                    groups.append(CategoryGroup(category=category, sphere=sphere, entries=entries))

        return cls(groups=tuple(groups))

    def group(self, category: str, sphere: Sphere) -> Optional[CategoryGroup]:
        """Return the group for a category and sphere, if it has entries"""
        for group in self.groups:
            if group.category == category and group.sphere == sphere:
                return group
        return None

    def for_sphere(self, sphere: Sphere) -> List[CategoryGroup]:
        return [g for g in self.groups if g.sphere == sphere]

    def __len__(self) -> int:
        return len(self.groups)
