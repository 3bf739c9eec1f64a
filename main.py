from __future__ import annotations
import argparse
from pathlib import Path
import sys
from typing import List, Optional

from settleup.core.errors import OutputWriteError, SettleUpError
from settleup.core.parser import DEFAULT_DELIMITER, RecordParser
from settleup.utils.exporting import ExportUtils


def default_output_path(input_path: Path) -> Path:
    return Path(input_path).with_suffix(".xls")


def delimiter_arg(value: str) -> str:
    if not value:
        raise argparse.ArgumentTypeError("delimiter must not be empty")
    return value


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="settleup2excel",
        description="Convert a Settle Up text export → spreadsheet",
    )
    ap.add_argument("-i", metavar="file", dest="input", required=True, help="the input file")
    ap.add_argument("-o", metavar="file", dest="output", help="the output file (default: input with .xls suffix)")
    ap.add_argument("-d", metavar="delimiter", dest="delimiter", default=DEFAULT_DELIMITER, type=delimiter_arg,
                    help=f"delimiter string (default: {DEFAULT_DELIMITER!r})")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    in_path = Path(args.input)
    print(f"Parsing file: {in_path}")
    if args.output:
        out_path = Path(args.output)
    else:
        out_path = default_output_path(in_path)
        print(f"No output specified, writing result to: {out_path}")

    parser = RecordParser({"delimiter": args.delimiter})

    try:
        records = parser.parse_text_file(in_path)
    except SettleUpError as e:
        print(f"ERR: Failed to parse input: {e}", file=sys.stderr)
        return 3

    if not records:
        print("WARNING: No payments parsed. Check the delimiter; writing header row only.")

    try:
        ExportUtils.write_workbook(records, out_path)
    except (OSError, OutputWriteError) as e:
        print(f"ERR: Failed to write output: {e}", file=sys.stderr)
        return 6

    for line in ExportUtils.totals_report(records):
        print(line)
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
