"""Command-line interface for the shiftboard schedule tools."""

import argparse
import json
import logging
import os
import sys
from calendar import monthrange
from datetime import date
from pathlib import Path
from typing import Optional

from shiftboard.config import RenderConfig, Settings, encode_private_key
from shiftboard.domain.models import MonthlyShiftBatch, ShiftRecord
from shiftboard.domain.slots import RENDER_GRID
from shiftboard.errors import ShiftboardError
from shiftboard.output.image_generator import ImageGenerator
from shiftboard.output.pdf_generator import PDFGenerator
from shiftboard.output.report_generator import ReportGenerator
from shiftboard.validation.validator import RecordValidator

# Sample shift patterns as (first slot, last slot)
SAMPLE_PATTERNS = [
    ("11:00", "14:30"),  # Lunch
    ("12:00", "16:30"),  # Midday
    ("15:00", "18:30"),  # Afternoon
    ("17:00", "21:00"),  # Closing
    ("11:00", "13:30"),  # Short opening
]


def create_sample_records(
    year: int,
    month: int,
    count: int = 5,
    days: Optional[int] = None,
) -> list[ShiftRecord]:
    """Create sample confirmed shifts for one month.

    Args:
        year: Year of the sample month.
        month: Month of the sample month.
        count: Number of staff members.
        days: Number of days to fill from the 1st. If None, the whole month.
    """
    names = [
        "Alice", "Bob", "Carol", "David", "Eve", "Frank", "Grace", "Henry",
        "Ivy", "Jack", "Kate", "Leo", "Mia", "Noah", "Olivia", "Paul",
    ]
    last_day = monthrange(year, month)[1]
    days = last_day if days is None else min(days, last_day)

    records = []
    for day in range(1, days + 1):
        d = date(year, month, day)
        for i in range(count):
            # Each person works roughly two days out of three
            if (i + day) % 3 == 0:
                continue
            name = names[i % len(names)]
            if i >= len(names):
                name = f"{name}{i // len(names) + 1}"
            first, last = SAMPLE_PATTERNS[(i + day) % len(SAMPLE_PATTERNS)]
            records.append(ShiftRecord(
                date=d.isoformat(),
                user=f"{name.lower()}@example.com",
                display_name=name,
                times=tuple(RENDER_GRID.span(first, last)),
            ))
    return records


def load_records(path: str) -> list[ShiftRecord]:
    """Load shift documents from a JSON file holding a list of objects."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ShiftboardError(f"{path}: expected a JSON list of shift records")
    return [ShiftRecord.from_dict(item) for item in data if isinstance(item, dict)]


def _input_batch(args) -> MonthlyShiftBatch:
    records = load_records(args.input)
    if args.as_is:
        return MonthlyShiftBatch(year=args.year, month=args.month, records=records)
    return MonthlyShiftBatch.build(records, args.year, args.month)


def run_render(args) -> None:
    batch = _input_batch(args)
    output = args.output or f"{args.year}-{args.month:02d}-shift.png"
    ImageGenerator(RenderConfig(font_path=args.font)).generate(batch, None, None, output)
    print(f"Rendered {len(batch)} shifts to {output}")


def run_pdf(args) -> None:
    batch = _input_batch(args)
    output = args.output or f"{args.year}-{args.month:02d}-shift.pdf"
    PDFGenerator().generate(batch, None, None, output)
    print(f"PDF created: {output}")


def run_report(args) -> None:
    batch = _input_batch(args)
    generator = ReportGenerator()
    if args.output:
        generator.generate(batch, None, None, args.output)
        print(f"Report written to {args.output}")
    else:
        print(generator.generate_to_string(batch), end="")


def run_validate(args) -> int:
    records = load_records(args.input)
    result = RecordValidator().validate(records, args.year, args.month)
    print(f"Checked {len(records)} records")
    for warning in result.warnings:
        print(f"  warning: {warning}")
    if result.is_valid:
        print("\nValidation: PASSED")
        return 0
    print(f"\nValidation: FAILED ({len(result.errors)} errors)")
    for error in result.errors:
        print(f"    - {error}")
    return 1


def run_demo(args) -> None:
    """Render a sample month."""
    records = create_sample_records(args.year, args.month, args.count, args.days)
    batch = MonthlyShiftBatch.build(records, args.year, args.month)
    print(f"Generated {len(batch)} sample shifts for {args.year}-{args.month:02d}")

    output = args.output or f"{args.year}-{args.month:02d}-demo.png"
    if output.endswith(".pdf"):
        PDFGenerator().generate(batch, None, None, output)
    else:
        ImageGenerator().generate(batch, None, None, output)
    print(f"  Written to {output}")
    print()
    print(ReportGenerator().generate_to_string(batch), end="")


def _firestore_store(settings: Settings):
    from shiftboard.store.firestore_store import FirestoreShiftStore, create_firestore_client

    return FirestoreShiftStore(create_firestore_client(settings.firebase_credentials()))


def run_send_image(args) -> None:
    from shiftboard.delivery.publisher import publish_image
    from shiftboard.delivery.webhook import WebhookSink

    settings = Settings.from_env(args.env_file)
    sink = WebhookSink(settings.require_webhook_url())
    batch = publish_image(_firestore_store(settings), sink, args.year, args.month)
    print(f"Sent schedule image with {len(batch)} shifts")


def run_send_sheet(args) -> None:
    import gspread

    from shiftboard.delivery.publisher import publish_sheet
    from shiftboard.delivery.sheet import SheetSink

    settings = Settings.from_env(args.env_file)
    client = gspread.service_account_from_dict(settings.google_credentials())
    sink = SheetSink(client.open_by_key(settings.require_spreadsheet_id()))
    result = publish_sheet(_firestore_store(settings), sink, args.year, args.month)
    print(f"Wrote {len(result.written)} cells, skipped {len(result.skipped)}")
    for entry in result.skipped:
        print(f"    - no cell for {entry['name']} on {entry['date']}")


def run_encode_key(args) -> int:
    """Print FIREBASE_PRIVATE_KEY from an env file, base64-encoded."""
    from dotenv import dotenv_values

    values = dotenv_values(args.env_file) if os.path.exists(args.env_file) else {}
    raw = values.get("FIREBASE_PRIVATE_KEY") or os.environ.get("FIREBASE_PRIVATE_KEY")
    if not raw:
        print(f"FIREBASE_PRIVATE_KEY is not set in {args.env_file}", file=sys.stderr)
        return 1
    print("Paste this value into FIREBASE_PRIVATE_KEY_B64:\n")
    print(encode_private_key(raw))
    return 0


def _add_month_args(parser: argparse.ArgumentParser, required: bool = True) -> None:
    today = date.today()
    parser.add_argument(
        "--year", "-y",
        type=int,
        required=required,
        default=None if required else today.year,
        help="Year of the schedule",
    )
    parser.add_argument(
        "--month", "-m",
        type=int,
        required=required,
        default=None if required else today.month,
        choices=range(1, 13),
        metavar="MONTH",
        help="Month of the schedule (1-12)",
    )


def _add_input_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", help="JSON file with a list of shift records")
    _add_month_args(parser)
    parser.add_argument(
        "--output", "-o",
        type=str,
        help="Output file path",
    )
    parser.add_argument(
        "--as-is",
        action="store_true",
        help="Keep records in file order instead of filtering and sorting by date",
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="shiftboard - monthly shift schedule export",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s render shifts.json -y 2025 -m 5      Render a PNG schedule table
  %(prog)s pdf shifts.json -y 2025 -m 5         Render a printable PDF
  %(prog)s report shifts.json -y 2025 -m 5      Print a coverage report
  %(prog)s demo --count 8                       Render a sample month

  %(prog)s send-image -y 2025 -m 5              Post confirmed shifts to the webhook
  %(prog)s send-sheet -y 2025 -m 5              Write confirmed shifts to the sheet
  %(prog)s encode-key                           Base64-encode the Firebase key
        """,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    render_parser = subparsers.add_parser("render", help="Render shift records to PNG")
    _add_input_args(render_parser)
    render_parser.add_argument("--font", type=str, help="TrueType font file for labels")

    pdf_parser = subparsers.add_parser("pdf", help="Render shift records to PDF")
    _add_input_args(pdf_parser)

    report_parser = subparsers.add_parser("report", help="Print a text coverage report")
    _add_input_args(report_parser)

    validate_parser = subparsers.add_parser("validate", help="Check shift records")
    validate_parser.add_argument("input", help="JSON file with a list of shift records")
    validate_parser.add_argument("--year", "-y", type=int, help="Expected year")
    validate_parser.add_argument("--month", "-m", type=int, help="Expected month")

    demo_parser = subparsers.add_parser("demo", help="Render a sample month")
    _add_month_args(demo_parser, required=False)
    demo_parser.add_argument(
        "--count", "-c",
        type=int,
        default=5,
        help="Number of staff members (default: 5)",
    )
    demo_parser.add_argument(
        "--days", "-d",
        type=int,
        default=7,
        help="Number of days to fill (default: 7)",
    )
    demo_parser.add_argument(
        "--output", "-o",
        type=str,
        help="Output PNG or PDF file path",
    )

    for name, help_text in (
        ("send-image", "Post the confirmed schedule image to the webhook"),
        ("send-sheet", "Write the confirmed schedule to the spreadsheet"),
    ):
        send_parser = subparsers.add_parser(name, help=help_text)
        _add_month_args(send_parser)
        send_parser.add_argument(
            "--env-file",
            type=str,
            default=".env.local",
            help="Dotenv file with credentials (default: .env.local)",
        )

    key_parser = subparsers.add_parser("encode-key", help="Base64-encode FIREBASE_PRIVATE_KEY")
    key_parser.add_argument(
        "--env-file",
        type=str,
        default=".env.local",
        help="Dotenv file to read (default: .env.local)",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    handlers = {
        "render": run_render,
        "pdf": run_pdf,
        "report": run_report,
        "validate": run_validate,
        "demo": run_demo,
        "send-image": run_send_image,
        "send-sheet": run_send_sheet,
        "encode-key": run_encode_key,
    }
    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        status = handler(args)
    except (ShiftboardError, ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return status or 0


if __name__ == "__main__":
    sys.exit(main())
