from enum import Enum

class Direction(Enum):
    """Represents whether money is coming in or out"""
    INBOUND = "inbound" # in
    OUTBOUND = "outbound" # out


class Sphere(Enum):
    """Which side of the ledger an entry belongs to"""
    PERSONAL = "personal"
    WORK = "work"


class EntryType(Enum):
    EXPENSE = "Expense"
    INCOME = "Income"
    TRANSFER = "Transfer"
