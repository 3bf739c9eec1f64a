from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, Iterable, List, Optional

COLUMNS = ["Payer", "Amount", "Currency", "Date", "Category", "Comment"]


@dataclass(frozen=True)
class Payment:
    payer: str
    amount: float
    currency: str
    date: Optional[datetime] = None
    category: Optional[str] = None
    comment: Optional[str] = None

    def with_metadata(self, date: datetime, category: str, comment: str) -> "Payment":
        return replace(self, date=date, category=category, comment=comment)

    def as_row(self) -> Dict[str, object]:
        return {
            "Payer": self.payer,
            "Amount": self.amount,
            "Currency": self.currency,
            "Date": self.date,
            "Category": self.category,
            "Comment": self.comment,
        }


def dedupe(payments: Iterable[Payment]) -> List[Payment]:
    """Drop repeated payments, keeping the first occurrence of each."""
    return list(dict.fromkeys(payments))
