from __future__ import annotations

import sys
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from settleup.core.errors import DateFormatError, RecordFormatError
from settleup.core.payment import Payment, dedupe
from settleup.utils.dates import parse_date
from settleup.utils.parsing import ParsingUtils

DEFAULT_DELIMITER = "a payé"
DEFAULT_ENCODING = "utf-8"

HYPHEN = "-"


class State(Enum):
    AWAITING_HEADER = "awaiting_header"
    AWAITING_METADATA = "awaiting_metadata"


class RecordParser:
    """Pairs each delimiter line of an export with the metadata line after it.

    A delimiter line reads ``<payer> <delimiter> <currency> <amount>``; the
    line right after it reads ``<category> [comment...] <dd.MM.yy> <HH:mm>``.
    Lines outside such a pair are ignored.
    """

    def __init__(self, config: Optional[Dict] = None):
        config = config or {}
        self.delimiter: str = config.get("delimiter", DEFAULT_DELIMITER)
        if not self.delimiter:
            raise ValueError("Config delimiter must be a non-empty string")
        self.encoding: str = config.get("encoding") or DEFAULT_ENCODING
        self.debug: bool = bool(config.get("debug", False))

    def parse_header(self, line: str, line_no: Optional[int] = None) -> Payment:
        payer_text, amount_text = line.split(self.delimiter, 1)
        payer = ParsingUtils.normalize_text(payer_text)

        amount_tokens = ParsingUtils.tokens(amount_text)
        if len(amount_tokens) < 2:
            raise RecordFormatError(
                f"expected '<currency> <amount>' after {self.delimiter!r}, got {amount_text.strip()!r}",
                line_no,
            )

        currency, raw_amount = amount_tokens[0], amount_tokens[1]
        amount = ParsingUtils.coerce_amount(raw_amount)
        if amount is None:
            raise RecordFormatError(f"amount {raw_amount!r} is not a number", line_no)

        return Payment(payer=payer, amount=amount, currency=currency)

    def parse_metadata(self, line: str, line_no: Optional[int] = None) -> Tuple[datetime, str, str]:
        tokens = ParsingUtils.tokens(line)
        # category + date + time
        if len(tokens) < 3:
            raise RecordFormatError(
                f"expected '<category> [comment] <dd.MM.yy> <HH:mm>', got {line.strip()!r}",
                line_no,
            )

        try:
            date = parse_date(" ".join(tokens[-2:]))
        except DateFormatError as e:
            raise RecordFormatError(str(e), line_no) from e

        category = tokens[0]
        comment = " ".join(t for t in tokens[1:-2] if t != HYPHEN)
        return date, category, comment

    def _consume(self, lines: Iterable[str], records: List[Payment]) -> None:
        state = State.AWAITING_HEADER
        pending: Optional[Payment] = None
        header_no = 0

        for line_no, raw in enumerate(lines, start=1):
            line = raw.rstrip("\r\n")

            if state is State.AWAITING_HEADER:
                if self.delimiter not in line:
                    continue
                pending = self.parse_header(line, line_no)
                header_no = line_no
                state = State.AWAITING_METADATA
                if self.debug:
                    print(f"DEBUG: line {line_no}: header → payer={pending.payer!r} "
                          f"amount={pending.amount} currency={pending.currency!r}")
                continue

            date, category, comment = self.parse_metadata(line, line_no)
            payment = pending.with_metadata(date, category, comment)
            records.append(payment)
            pending = None
            state = State.AWAITING_HEADER
            if self.debug:
                print(f"DEBUG: line {line_no}: metadata → date={date:%Y-%m-%d %H:%M} "
                      f"category={category!r} comment={comment!r}")

        if state is State.AWAITING_METADATA:
            raise RecordFormatError(
                "payment line has no following date/category line", header_no
            )

    def parse(self, lines: Iterable[str]) -> List[Payment]:
        records: List[Payment] = []
        self._consume(lines, records)
        return dedupe(records)

    def parse_text_file(self, file_path: Path) -> List[Payment]:
        # Read failures keep whatever was parsed before them
        records: List[Payment] = []
        try:
            with Path(file_path).open("r", encoding=self.encoding) as f:
                self._consume(f, records)
        except (OSError, UnicodeDecodeError) as e:
            print(f"ERR: Input file could not be read: {e}", file=sys.stderr)

        unique = dedupe(records)
        if self.debug and len(unique) != len(records):
            print(f"DEBUG: dropped {len(records) - len(unique)} duplicate payment(s)")
        return unique
