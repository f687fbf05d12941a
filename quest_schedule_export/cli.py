"""
Command-line interface: read a saved Quest class schedule page and export it to .ics.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .compiler import compile_schedule
from .export import schedule_filename, write_ics
from .models import (
    ANCHOR_STRATEGIES,
    DEFAULT_CALENDAR_NAME,
    DEFAULT_DATE_FORMAT,
    DEFAULT_TIMEZONE,
    ExportOptions,
    NoQualifyingRows,
)
from .schedule_html import SCHEDULE_PAGE_TITLE, parse_class_schedule_html

EXIT_NO_EVENTS = 2


def _output_path(args, student_name: str) -> Path:
    if not args.output:
        return Path(schedule_filename(student_name))
    out = Path(args.output)
    return out if out.suffix.lower() == ".ics" else Path(args.output + ".ics")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description=(
            "Export a Quest 'My Class Schedule' page to an iCalendar (.ics) file.\n"
            "- Save the page in List View as 'Webpage, Complete', then pass the saved HTML file."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("html", metavar="HTML_PATH", help="Saved 'My Class Schedule' HTML file.")
    parser.add_argument(
        "-o",
        "--output",
        help="Output .ics path. Default: <student-name>-uw-class-schedule.ics",
    )
    parser.add_argument(
        "--timezone",
        default=DEFAULT_TIMEZONE,
        help=f"Time zone the classes are held in. Default: {DEFAULT_TIMEZONE}",
    )
    parser.add_argument(
        "--calendar-name",
        default=DEFAULT_CALENDAR_NAME,
        help=f"Calendar name shown by calendar apps. Default: {DEFAULT_CALENDAR_NAME}",
    )
    date_fmt = parser.add_mutually_exclusive_group()
    date_fmt.add_argument(
        "--date-format",
        default=DEFAULT_DATE_FORMAT,
        help="strptime format of the Start/End Date column. Default: %%m/%%d/%%Y",
    )
    date_fmt.add_argument(
        "--day-first",
        action="store_true",
        help="Dates are shown day first (DD/MM/YYYY), as in non-US Quest locales.",
    )
    parser.add_argument(
        "--anchor",
        choices=ANCHOR_STRATEGIES,
        default="advance",
        help="advance: start each series on its first real class (default). "
        "exclude: start the day before the term and cancel that instance with EXDATE.",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the compiled events instead of writing a file.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every skipped row.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    html_path = Path(args.html)
    if not html_path.exists():
        print(f"Error: HTML file not found: {html_path}", file=sys.stderr)
        return 1

    try:
        options = ExportOptions(
            timezone=args.timezone,
            calendar_name=args.calendar_name,
            date_format="%d/%m/%Y" if args.day_first else args.date_format,
            anchor=args.anchor,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        page = parse_class_schedule_html(html_path=html_path)
    except ValueError as e:
        print(f"Error parsing class schedule HTML: {e}", file=sys.stderr)
        return 1

    if page.title and page.title != SCHEDULE_PAGE_TITLE:
        print(f"Warning: page title is {page.title!r}, expected {SCHEDULE_PAGE_TITLE!r}.", file=sys.stderr)
    if not page.list_view:
        print("Warning: the page was not saved in List View.", file=sys.stderr)

    result = compile_schedule(page.rows, options)
    if isinstance(result, NoQualifyingRows):
        print(result.message, file=sys.stderr)
        return EXIT_NO_EVENTS

    if args.list:
        for ev in result.events:
            print(
                f"{ev.summary:<28} {ev.start_stamp} {ev.end_stamp} "
                f"{','.join(ev.weekdays):<15} until {ev.until_stamp}  {ev.location}"
            )
        return 0

    out_path = write_ics(result.document, _output_path(args, page.student_name))
    msg = f"Exported {len(result.events)} class meeting(s) to {out_path}"
    if result.skipped:
        msg += f" ({result.skipped} row(s) skipped, rerun with -v for details)"
    print(msg)
    return 0


if __name__ == "__main__":
    sys.exit(main())
