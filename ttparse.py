#!/usr/bin/env python3
"""
ttparse: Reconstructs structured class schedules from university timetable PDFs.

The tool renders each page into positioned text fragments (or plain text),
recognizes the department/semester/section banner, locates the six-slot time
grid and maps every day row onto (day, slot, room, subject) entries. Results can
be printed, saved as JSON, stored in a SQLite database and queried for free
rooms.
"""

import argparse
import json
import logging
import os
import sys
import time

# --- Dependency Imports ---
try:
    from rich.console import Console
    from rich.table import Table
except ImportError as e:
    print(f"Error: Missing required library. -> {e}")
    print("Please install all core dependencies with:")
    print("pip install pdfminer.six rich")
    sys.exit(1)

# --- Local Application Imports ---
from core.log_utils import TOPIC_LOGGERS, setup_logging
from ttparse_lib.api import MODES, process_dump, process_pdf
from ttparse_lib.constants import TIME_SLOTS
from ttparse_lib.errors import UnparseableSourceError
from ttstore_lib.services.config_service import ConfigService
from ttstore_lib.services.storage_service import StorageService

DEFAULT_CONFIG = os.path.join(os.path.expanduser("~"), ".ttparse", "ttparse.cfg")


# --- CUSTOM ARGPARSE FORMATTER ---
class CustomHelpFormatter(
    argparse.ArgumentDefaultsHelpFormatter, argparse.RawTextHelpFormatter
):
    """
    A custom argparse formatter that combines showing default values with
    preserving newline formatting in help text.
    """

    pass


class Application:
    """Orchestrates parsing, storage and queries based on command-line arguments."""

    def __init__(self, args):
        self.args = args
        self.stats = {}
        self.console = Console()
        self.config_service = ConfigService(args.config)
        self.storage = None

    def run(self):
        """Main entry point for the application logic."""
        self.stats["start_time"] = time.monotonic()
        setup_logging(
            level=logging.INFO if self.args.verbose else logging.WARNING,
            color_logs=self.args.color_logs,
            debug_topics=self.args.debug_topics,
            log_file=self.args.log_file,
            context=os.path.basename(self.args.input_file) if self.args.input_file else None,
        )

        settings = self.config_service.get_settings()
        options = self.config_service.get_parser_options()
        if self.args.store or self.args.free_rooms:
            self._open_storage(settings)

        if not self.args.input_file and not self.args.free_rooms:
            logging.getLogger("ttparse").error(
                "Nothing to do: give an input file or --free-rooms."
            )
            sys.exit(1)

        if self.args.input_file:
            result = self._parse_input(options)
            self._display_summary(result)
            self._save_json(result)
            if self.args.store:
                totals = self.storage.save_sections(
                    os.path.basename(self.args.input_file), result.sections
                )
                self.console.print(
                    f"Stored {totals['sections']} section(s), {totals['entries']} entries, "
                    f"{totals['new_rooms']} new room(s)."
                )

        if self.args.free_rooms:
            day, time_from, time_to = self.args.free_rooms
            self._display_free_rooms(self.storage.find_free_rooms(day, time_from, time_to))

        total = time.monotonic() - self.stats["start_time"]
        logging.getLogger("ttparse").info("Done in %.2f seconds.", total)

    def _open_storage(self, settings):
        db_path = self.args.db or settings["Storage"]["database"]
        db_dir = os.path.dirname(db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
        self.storage = StorageService(db_path)
        seed = settings["Storage"].get("seed_rooms", "true").lower() in ("1", "true", "yes")
        self.storage.init_db(seed_rooms=seed)

    def _parse_input(self, options):
        """Dispatches on the input type: PDF, JSON page dump or text dump."""
        mode = self.args.mode or options.get("mode", "auto")
        path = self.args.input_file
        if path.lower().endswith(".pdf"):
            return process_pdf(path, mode=mode, pages_str=self.args.pages, options=options)
        return process_dump(path, mode=mode, options=options)

    def _display_summary(self, result):
        """Prints one row per section and the skipped-page diagnostics."""
        table = Table(title="Parsed Sections")
        for col in ("Department", "Semester", "Section", "Room", "Pages", "Entries"):
            table.add_column(col)
        for s in result.sections:
            pages = f"{s.page_start}-{s.page_end}" if s.page_start else "-"
            table.add_row(
                s.department or "?",
                s.year_sem,
                s.section,
                s.default_room or "-",
                pages,
                str(len(s.entries)),
            )
        self.console.print(table)
        if self.args.show_entries:
            for s in result.sections:
                self._display_grid(s)
        if result.skipped:
            self.console.print(f"[yellow]{len(result.skipped)} page(s) skipped[/yellow]")
            for sp in result.skipped:
                detail = f" (section {sp.section})" if sp.section else ""
                self.console.print(f"  Page {sp.page}: {sp.reason}{detail}")

    def _display_grid(self, section):
        """Prints a section's entries as a day x slot grid."""
        table = Table(title=f"{section.section} {section.year_sem}")
        table.add_column("Day")
        for slot in TIME_SLOTS:
            table.add_column(slot)
        days = []
        for e in section.entries:
            if e.day not in days:
                days.append(e.day)
        for day in days:
            cells = []
            for slot in TIME_SLOTS:
                hits = [e for e in section.entries if e.day == day and e.time_slot == slot]
                cells.append("\n".join(f"{e.subject} ({e.room_number or '-'})" for e in hits))
            table.add_row(day, *cells)
        self.console.print(table)

    def _display_free_rooms(self, report):
        slots = ", ".join(report["overlapping_slots"]) or "none"
        self.console.print(
            f"{report['day']} {report['from']}-{report['to']} overlaps: {slots}"
        )
        table = Table(title=f"Free Rooms ({len(report['free_rooms'])})")
        table.add_column("Room")
        table.add_column("Type")
        for room in report["free_rooms"]:
            table.add_row(room["room_number"], room["room_type"])
        self.console.print(table)
        if report["occupied_rooms"]:
            self.console.print("Occupied: " + ", ".join(report["occupied_rooms"]))

    def _save_json(self, result):
        """Saves the parse result to a JSON file if requested."""
        if not self.args.output_file:
            return
        try:
            with open(self.args.output_file, "w", encoding="utf-8") as f:
                json.dump(result.to_dict(), f, indent=2)
            logging.getLogger("ttparse").info(
                "Sections saved to: '%s'", self.args.output_file
            )
        except IOError as e:
            logging.getLogger("ttparse").error("Error saving JSON output: %s", e)

    @staticmethod
    def parse_arguments(args=None):
        """Parses command-line arguments for the script."""
        examples = [
            "\nExamples:",
            "  python ttparse.py timetable.pdf --show-entries",
            "  python ttparse.py timetable.pdf -o sections.json --store",
            "  python ttparse.py dump.txt --mode text",
            "  python ttparse.py --free-rooms Monday 11:10 01:00",
            "  python ttparse.py timetable.pdf -d header,columns --color-logs",
        ]
        parser = argparse.ArgumentParser(
            description="Reconstructs class schedules from timetable PDFs.",
            formatter_class=CustomHelpFormatter,
            add_help=False,
            epilog="\n".join(examples),
        )

        g_opts = parser.add_argument_group("Main Options")
        g_opts.add_argument(
            "input_file",
            nargs="?",
            default=None,
            help="Timetable PDF, JSON page dump or text dump.",
        )
        g_opts.add_argument(
            "-h",
            "--help",
            action="help",
            help="Show this help message and exit.",
        )
        g_opts.add_argument(
            "-c",
            "--config",
            default=DEFAULT_CONFIG,
            metavar="FILE",
            help="Configuration file. (default: %(default)s)",
        )

        g_proc = parser.add_argument_group("Processing Control")
        g_proc.add_argument(
            "-m",
            "--mode",
            default=None,
            choices=MODES,
            help="Extraction strategy. (default: from config, 'auto')",
        )
        g_proc.add_argument(
            "-p",
            "--pages",
            default="all",
            metavar="PAGES",
            help="Pages to process (e.g., '1,3,5-7'). (default: %(default)s)",
        )

        g_store = parser.add_argument_group("Storage & Queries")
        g_store.add_argument(
            "--db",
            default=None,
            metavar="FILE",
            help="SQLite database path. (default: from config)",
        )
        g_store.add_argument(
            "-s",
            "--store",
            action="store_true",
            help="Record parsed sections in the database. (default: %(default)s)",
        )
        g_store.add_argument(
            "-F",
            "--free-rooms",
            nargs=3,
            metavar=("DAY", "FROM", "TO"),
            default=None,
            help="List rooms free on DAY between FROM and TO (e.g. Monday 11:10 01:00).",
        )

        g_out = parser.add_argument_group("Script Output & Actions")
        g_out.add_argument(
            "-o",
            "--output-file",
            default=None,
            metavar="FILE",
            help="Save parsed sections as JSON.",
        )
        g_out.add_argument(
            "-E",
            "--show-entries",
            action="store_true",
            help="Print each section's day x slot grid. (default: %(default)s)",
        )
        g_out.add_argument(
            "--log-file",
            metavar="FILE",
            default=None,
            help="Redirect all logging output to a specified file.",
        )
        g_out.add_argument(
            "--color-logs",
            action="store_true",
            help="Enable colored logging output. (default: %(default)s)",
        )
        g_out.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Enable INFO logging for detailed progress. (default: %(default)s)",
        )
        g_out.add_argument(
            "-d",
            "--debug",
            nargs="?",
            const="all",
            dest="debug_topics",
            metavar="TOPICS",
            help="Enable DEBUG logging for topics (all," + ",".join(TOPIC_LOGGERS) + ").",
        )

        return parser.parse_args(args)


def main():
    """Main entry point for the script."""
    # Basic logging config for early errors before full setup
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        args = Application.parse_arguments(sys.argv[1:])
        app = Application(args)
        app.run()
    except (FileNotFoundError, UnparseableSourceError) as e:
        logging.getLogger("ttparse").critical(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logging.getLogger("ttparse").info("\nProcess interrupted by user. Exiting.")
        sys.exit(0)
    except Exception as e:
        logging.getLogger("ttparse").critical(
            "\nAn unexpected error occurred: %s", e, exc_info=True
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
