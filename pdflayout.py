#!/usr/bin/env python3
"""
pdflayout: Rebuilds the reading structure of a PDF as an HTML fragment.

Text runs are grouped into lines, columns and blocks, headings are found from
the document's bookmarks (or, failing that, from font sizes) and everything is
emitted as semantic HTML. Embedded images are inlined as PNG data URLs.
"""

import argparse
import asyncio
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
    print("pip install pdfminer.six Pillow rich")
    sys.exit(1)

# --- Local Application Imports ---
from pdflayout_lib.api import DocumentImporter, parse_page_selection
from pdflayout_lib.constants import DEFAULT_CONFIG
from pdflayout_lib.extractor import ExtractionError, PDFMinerSource
from pdflayout_lib.log_utils import PROJECT_TOPICS, ContextFilter, setup_logging


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
    """Runs one PDF import based on command-line arguments."""

    DEFAULT_FILENAME_SENTINEL = "__DEFAULT_FILENAME__"

    def __init__(self, args):
        self.args = args
        self.config = DEFAULT_CONFIG.replace(max_concurrent_pages=args.workers)

    def run(self):
        """Main entry point for the application logic. Returns an exit code."""
        start = time.monotonic()
        setup_logging(
            project_name="pdflayout",
            level=logging.INFO if self.args.verbose else logging.WARNING,
            color_logs=self.args.color_logs,
            debug_topics=self.args.debug_topics,
            log_file=self.args.log_file,
        )
        app_log = logging.getLogger("pdflayout")

        log_filter = ContextFilter(os.path.basename(self.args.pdf_file))
        for handler in logging.getLogger().handlers:
            handler.addFilter(log_filter)

        try:
            pages = parse_page_selection(self.args.pages)
        except ValueError as e:
            app_log.error("Invalid --pages value: %s", e)
            return 1

        self._log_run_conditions()
        try:
            with PDFMinerSource(self.args.pdf_file) as source:
                importer = DocumentImporter(source, self.config)
                html = asyncio.run(importer.run(pages))
        except ExtractionError as e:
            app_log.error("Could not import '%s': %s", self.args.pdf_file, e)
            return 1

        if self.args.dry_run:
            self._display_dry_run_summary(importer.stats)
        else:
            self._save_output(html)
        app_log.info("Total Execution Time: %.1f seconds", time.monotonic() - start)
        return 0

    def _log_run_conditions(self):
        """If debugging is enabled, logs the script arguments."""
        if self.args.debug_topics:
            logging.getLogger("pdflayout.api").debug(
                "--- Script Running Conditions ---\n%s",
                "\n".join(f"  - {k:<14} : {v}" for k, v in vars(self.args).items()),
            )

    def _resolve_output_filename(self):
        """Returns the output path, defaulting to the PDF name, or None."""
        if self.args.output_file == self.DEFAULT_FILENAME_SENTINEL:
            pdf_base = os.path.splitext(os.path.basename(self.args.pdf_file))[0]
            return f"{pdf_base}.html"
        return self.args.output_file

    def _save_output(self, html):
        """Writes the HTML fragment to the output file, or stdout."""
        output_file = self._resolve_output_filename()
        if not output_file:
            print(html)
            return
        try:
            with open(output_file, "w", encoding="utf-8") as f:
                f.write(html)
            logging.getLogger("pdflayout").info("HTML saved to: '%s'", output_file)
        except IOError as e:
            logging.getLogger("pdflayout").error("Error saving HTML: %s", e)

    def _display_dry_run_summary(self, stats):
        """Prints a table summarising the reconstructed document."""
        table = Table(title=f"Document Structure Summary: {self.args.pdf_file}")
        table.add_column("Metric", style="bold sky_blue2")
        table.add_column("Value", justify="right")
        rows = [
            ("Pages in document", f"{stats.get('page_count', 0)}"),
            ("Pages processed", f"{stats.get('pages', 0)}"),
            ("Columns", f"{stats.get('columns', 0)}"),
            ("Blocks", f"{stats.get('blocks', 0)}"),
            ("Headings", f"{stats.get('headings', 0)}"),
            ("Images", f"{stats.get('images', 0)}"),
            ("Outline targets", f"{stats.get('outline_targets', 0)}"),
            ("Body font size", f"{stats.get('body_font_size', 0):.1f}pt"),
            ("Extraction", f"{stats.get('extract_duration', 0):.2f}s"),
            ("Total", f"{stats.get('total_duration', 0):.2f}s"),
        ]
        for metric, value in rows:
            table.add_row(metric, value)
        Console().print(table)

    @staticmethod
    def parse_arguments(args=None):
        """Parses command-line arguments for the script."""
        examples = [
            "\nExamples:",
            "  python pdflayout.py document.pdf > document.html",
            "  python pdflayout.py document.pdf -o -p 1-10",
            "  python pdflayout.py document.pdf -D -v",
            "  python pdflayout.py document.pdf -d outline,classify --color-logs",
        ]
        parser = argparse.ArgumentParser(
            description="Rebuild the reading structure of a PDF as HTML.",
            formatter_class=CustomHelpFormatter,
            add_help=False,
            epilog="\n".join(examples),
        )
        S = Application.DEFAULT_FILENAME_SENTINEL
        topics = ",".join(sorted(PROJECT_TOPICS["pdflayout"]))

        g_opts = parser.add_argument_group("Main Options")
        g_opts.add_argument("pdf_file", help="Path to the input PDF file.")
        g_opts.add_argument(
            "-h",
            "--help",
            action="help",
            help="Show this help message and exit.",
        )

        g_proc = parser.add_argument_group("Processing Control")
        g_proc.add_argument(
            "-p",
            "--pages",
            default="all",
            metavar="PAGES",
            help="Pages to process (e.g., '1,3,5-7'). (default: %(default)s)",
        )
        g_proc.add_argument(
            "-w",
            "--workers",
            type=int,
            default=DEFAULT_CONFIG.max_concurrent_pages,
            metavar="N",
            help="Pages extracted concurrently. (default: %(default)s)",
        )

        g_out = parser.add_argument_group("Script Output & Actions")
        g_out.add_argument(
            "-o",
            "--output-file",
            nargs="?",
            const=S,
            default=None,
            metavar="FILE",
            help="Save the HTML to a file. Defaults to PDF name.",
        )
        g_out.add_argument(
            "-D",
            "--dry-run",
            action="store_true",
            help="Print a structure summary instead of the HTML. (default: %(default)s)",
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
            help=f"Enable DEBUG logging (all,{topics}).",
        )

        return parser.parse_args(args)


def main():
    """Main entry point for the script."""
    # Basic logging config for early errors before full setup
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        args = Application.parse_arguments(sys.argv[1:])
        app = Application(args)
        sys.exit(app.run())
    except FileNotFoundError as e:
        logging.getLogger("pdflayout").critical(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logging.getLogger("pdflayout").info("\nProcess interrupted by user. Exiting.")
        sys.exit(0)
    except Exception as e:
        logging.getLogger("pdflayout").critical(
            "\nAn unexpected error occurred: %s", e, exc_info=True
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
