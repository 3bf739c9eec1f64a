from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from io import BytesIO
from pathlib import Path
from typing import Dict, List

import pandas as pd
import xlwt
from openpyxl.styles import Alignment

from settleup.core.errors import OutputWriteError
from settleup.core.payment import COLUMNS, Payment

SHEET_NAME = "Accounting"
DATE_FORMAT = "dd/mm/yyyy hh:mm"
DATE_COL = COLUMNS.index("Date")

# rows per sheet, header included
XLS_MAX_ROWS = 65536
XLSX_MAX_ROWS = 1048576
MAX_CELL_CHARS = 32767


class ExportUtils:

    @staticmethod
    def sum_as_str(values):
        total = Decimal("0.00")
        for v in values:
            total += Decimal(str(v))
        return str(total.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))

    @staticmethod
    def records_to_frame(records: List[Payment]) -> pd.DataFrame:
        return pd.DataFrame([r.as_row() for r in records], columns=COLUMNS)

    @staticmethod
    def totals_by_currency(records: List[Payment]) -> Dict[str, str]:
        buckets: Dict[str, List[float]] = {}
        for r in records:
            buckets.setdefault(r.currency, []).append(r.amount)
        return {k: ExportUtils.sum_as_str(vs) for k, vs in buckets.items()}

    @staticmethod
    def totals_report(records: List[Payment]) -> List[str]:
        totals = ExportUtils.totals_by_currency(records)
        report = [f"Parsed {len(records)} payment(s):"]
        for currency, total in totals.items():
            report.append(f"  - {currency}: {total}")
        return report

    @staticmethod
    def check_limits(records: List[Payment], max_rows: int) -> None:
        if len(records) + 1 > max_rows:
            raise OutputWriteError(
                f"{len(records)} payments do not fit in one sheet (limit {max_rows - 1} rows after the header)"
            )
        for idx, r in enumerate(records, start=2):
            for field in (r.payer, r.currency, r.category, r.comment):
                if field is not None and len(field) > MAX_CELL_CHARS:
                    raise OutputWriteError(
                        f"row {idx}: text longer than {MAX_CELL_CHARS} characters"
                    )

    @staticmethod
    def _build_xls(df: pd.DataFrame) -> bytes:
        wb = xlwt.Workbook(encoding="utf-8")
        sheet = wb.add_sheet(SHEET_NAME)

        date_style = xlwt.XFStyle()
        date_style.num_format_str = DATE_FORMAT
        date_style.alignment.shri = xlwt.Alignment.SHRINK_TO_FIT

        for c, title in enumerate(df.columns):
            sheet.write(0, c, title)

        for r, row in enumerate(df.itertuples(index=False), start=1):
            for c, value in enumerate(row):
                if c == DATE_COL:
                    sheet.write(r, c, value.to_pydatetime(), date_style)
                else:
                    sheet.write(r, c, value)

        buf = BytesIO()
        wb.save(buf)
        return buf.getvalue()

    @staticmethod
    def _build_xlsx(df: pd.DataFrame) -> bytes:
        buf = BytesIO()
        with pd.ExcelWriter(buf, engine="openpyxl", datetime_format=DATE_FORMAT) as writer:
            df.to_excel(writer, sheet_name=SHEET_NAME, index=False)
            ws = writer.sheets[SHEET_NAME]
            for (cell,) in ws.iter_rows(min_row=2, min_col=DATE_COL + 1, max_col=DATE_COL + 1):
                cell.number_format = DATE_FORMAT
                cell.alignment = Alignment(shrink_to_fit=True)
        return buf.getvalue()

    @staticmethod
    def write_workbook(records: List[Payment], output_path: Path) -> None:
        """Write one "Accounting" sheet, replacing any file already at the path.

        ``.xlsx`` goes through openpyxl; every other suffix gets the legacy
        binary ``.xls`` format. The workbook is built in memory first, so a
        file that is already there survives when the records cannot be
        stored (:class:`OutputWriteError`).
        """
        output_path = Path(output_path)
        is_xlsx = output_path.suffix.lower() == ".xlsx"

        ExportUtils.check_limits(records, XLSX_MAX_ROWS if is_xlsx else XLS_MAX_ROWS)
        df = ExportUtils.records_to_frame(records)

        try:
            payload = ExportUtils._build_xlsx(df) if is_xlsx else ExportUtils._build_xls(df)
        except Exception as e:
            # xlwt signals format limits with bare Exception/ValueError
            raise OutputWriteError(f"Could not build workbook: {e}") from e

        output_path.parent.mkdir(parents=True, exist_ok=True)
        if output_path.exists():
            output_path.unlink()
        with output_path.open("wb") as f:
            f.write(payload)

        print(f"File has been written here: {output_path}")
