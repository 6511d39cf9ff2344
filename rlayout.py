#!/usr/bin/env python3
"""
rlayout: Resume PDF layout reconstruction and style inference.

This script decodes a resume PDF with pdfminer, runs the layout engine
(rlayout_lib) over its pages and writes the resulting LayoutDocument, and
optionally the style suggestions, as JSON.
"""

import argparse
import json
import logging
import os
import sys
import time
from dataclasses import replace

# --- Dependency Imports ---
try:
    from rich.console import Console
except ImportError as e:
    print(f"Error: Missing required library. -> {e}")
    print("Please install all core dependencies with:")
    print("pip install pdfminer.six rich")
    sys.exit(1)

# --- Local Application Imports ---
from core.log_utils import ContextFilter, setup_logging
from rlayout_lib.api import analyze_pdf, build_suggestions, parse_page_selection
from rlayout_lib.config import AnalyzerSettings, ConfigService
from rlayout_lib.exceptions import LayoutError, PdfDecodeError

log = logging.getLogger("rlayout")


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
    """Runs the layout analysis workflow based on command-line arguments."""

    def __init__(self, args):
        self.args = args
        self.console = Console()

    def run(self):
        """Main entry point for the application logic."""
        start = time.monotonic()
        setup_logging(
            project_name="rlayout",
            level=logging.INFO if self.args.verbose else logging.WARNING,
            color_logs=self.args.color_logs,
            debug_topics=self.args.debug_topics,
            log_file=self.args.log_file,
        )
        log_filter = ContextFilter(os.path.basename(self.args.pdf_file))
        for handler in logging.getLogger().handlers:
            handler.addFilter(log_filter)

        settings = self._load_settings()
        pages = parse_page_selection(self.args.pages)
        if pages is None and self.args.pages.lower() != "all":
            sys.exit(1)

        document = analyze_pdf(self.args.pdf_file, pages, settings)
        if not document.pages:
            log.error("No pages could be analyzed.")
            sys.exit(1)

        payload = document.to_dict()
        if self.args.suggestions:
            payload = {
                "layout": payload,
                "suggestions": build_suggestions(document).to_dict(),
            }
        self._write_output(payload)
        log.info(
            "Analyzed %d page(s), %d regions in %.2fs.",
            len(document.pages),
            len(document.regions),
            time.monotonic() - start,
        )

    def _load_settings(self) -> AnalyzerSettings:
        """Reads the config file when given and applies command-line overrides."""
        if self.args.config:
            settings = ConfigService(self.args.config).load_analyzer_settings()
        else:
            settings = AnalyzerSettings()
        if self.args.workers is not None:
            settings = replace(settings, max_workers=self.args.workers)
        return settings

    def _write_output(self, payload: dict):
        text = json.dumps(payload, indent=2, ensure_ascii=False)
        if not self.args.output_file:
            self.console.print_json(text)
            return
        with open(self.args.output_file, "w", encoding="utf-8") as f:
            f.write(text)
        log.info("Layout saved to %s", self.args.output_file)

    @staticmethod
    def parse_arguments(args=None):
        """Parses command-line arguments for the script."""
        examples = [
            "\nExamples:",
            "  python rlayout.py resume.pdf",
            '  python rlayout.py resume.pdf -o "resume_layout.json" --suggestions',
            "  python rlayout.py resume.pdf --pages 1 -d sect,col --color-logs",
            "  python rlayout.py resume.pdf --config rlayout.cfg -w 4",
        ]
        parser = argparse.ArgumentParser(
            description="Reconstructs the layout and style of a resume PDF.",
            formatter_class=CustomHelpFormatter,
            add_help=False,
            epilog="\n".join(examples),
        )

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
            "-c",
            "--config",
            metavar="FILE",
            default=None,
            help="INI file with analyzer settings. Created with defaults if missing.",
        )
        g_proc.add_argument(
            "-w",
            "--workers",
            type=int,
            default=None,
            metavar="N",
            help="Analyze pages on N threads (overrides the config file).",
        )

        g_out = parser.add_argument_group("Script Output & Actions")
        g_out.add_argument(
            "-o",
            "--output-file",
            default=None,
            metavar="FILE",
            help="Save the JSON result to a file instead of printing it.",
        )
        g_out.add_argument(
            "-s",
            "--suggestions",
            action="store_true",
            help="Include the style suggestions alongside the layout. (default: %(default)s)",
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
            help="Enable DEBUG logging (all,tokens,lines,regions,fonts,colors,"
            "graphics,sections,mapper,api,pdf,config).",
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
    except FileNotFoundError as e:
        log.critical(str(e))
        sys.exit(1)
    except (PdfDecodeError, LayoutError) as e:
        log.critical("Could not analyze PDF: %s", e)
        sys.exit(1)
    except KeyboardInterrupt:
        log.info("\nProcess interrupted by user. Exiting.")
        sys.exit(0)
    except Exception as e:
        log.critical("\nAn unexpected error occurred: %s", e, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
