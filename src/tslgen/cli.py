"""
Command-line interface for the TSL generator.

Usage:
    tslgen [options] input_file

Examples:
    tslgen input.tsl -o output.txt
    tslgen -s input.tsl
    tslgen -s -f yaml input.tsl
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Tuple

from rich.console import Console

from tslgen import __version__
from tslgen.analyzer import SpecificationReport, analyze_specification
from tslgen.errors import TslError
from tslgen.generator import FrameGenerator
from tslgen.result import GeneratorResult
from tslgen.serialization import result_to_json, result_to_yaml
from tslgen.tsl_parser import parse_tsl_file

logger = logging.getLogger(__name__)

BANNER = r"""
 _____  ___  __
/_  _/,' _/ / /   Test Specification Language
 / / _\ `. / /_   Generator
/_/ /___,'/___/
"""


def make_consoles(no_color: bool = False) -> Tuple[Console, Console]:
    """
    Build the stdout and stderr consoles.

    rich handles terminal detection, NO_COLOR and FORCE_COLOR. With
    no_color every style is dropped, bold included.
    """
    options = dict(highlight=False, soft_wrap=True)
    if no_color:
        options.update(no_color=True, color_system=None)
    return Console(**options), Console(stderr=True, **options)


def print_tsl_error(console: Console, error: TslError) -> None:
    console.print(f"Error: {error.error_type.value}: {error.message}", style="bold red", markup=False)
    location = error.location()
    if location:
        console.print(f"  at {location}", style="bold", markup=False)
    if error.line_content is not None:
        console.print(f"  | {error.line_content}", style="blue", markup=False)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tslgen",
        description="Generate test frames from a TSL specification",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tslgen input.tsl -o output.txt
  tslgen -s input.tsl
        """,
    )
    parser.add_argument("input_file", help="TSL specification to read")
    parser.add_argument(
        "-o", "--output",
        metavar="FILE",
        help="Output file path (default: <input_file>.tsl)",
    )
    parser.add_argument(
        "-s", "--stdout",
        action="store_true",
        help="Write frames to standard output instead of a file",
    )
    parser.add_argument(
        "-f", "--format",
        choices=["text", "json", "yaml"],
        default="text",
        help="Frame listing format (default: text)",
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=None,
        metavar="N",
        help="Abort generation after N search steps",
    )
    parser.add_argument(
        "--analyze",
        action="store_true",
        help="Print a specification report before generating",
    )
    parser.add_argument(
        "-y", "--yes",
        action="store_true",
        help="Write frames without asking",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def render_listing(result: GeneratorResult, fmt: str) -> str:
    if fmt == "json":
        return result_to_json(result) + "\n"
    if fmt == "yaml":
        return result_to_yaml(result)
    return result.to_frames_string()


def print_report(console: Console, report: SpecificationReport) -> None:
    """Pretty-print a SpecificationReport."""
    console.print("Specification report", style="bold cyan")
    console.print(f"  Categories:            {report.total_categories}")
    console.print(f"  Choices:               {report.total_choices}")
    console.print(f"  Properties:            {report.total_properties}")
    console.print(f"  Conditional choices:   {report.conditional_choices}")
    console.print(f"  Single / error tags:   {report.single_choices} / {report.error_choices}")
    console.print(f"  Branch-tagged choices: {report.branch_frame_choices}")
    console.print(f"  Max expression depth:  {report.max_expression_depth}")
    console.print(f"  Max normal frames:     {report.max_combinations}")
    for warning in report.warnings:
        logger.warning(warning)
    console.print()


def confirm(question: str) -> bool:
    try:
        answer = input(question).strip().lower()
    except EOFError:
        return False
    return answer in ("y", "yes")


def write_output(text: str, to_stdout: bool, output_path: Optional[str]) -> None:
    if to_stdout:
        sys.stdout.write(text)
        return
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(text)


def main(argv: Optional[List[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose)
    console, err_console = make_consoles(no_color=args.no_color)
    console.print(BANNER, style="bold cyan", markup=False)

    output_path = None if args.stdout else (args.output or f"{args.input_file}.tsl")
    destination = "standard output" if args.stdout else output_path

    try:
        console.print(f"Parsing TSL file: {args.input_file}", style="blue", markup=False)
        spec = parse_tsl_file(args.input_file)

        if args.analyze:
            print_report(console, analyze_specification(spec))

        console.print("Generating test frames...", style="blue", markup=False)
        result = FrameGenerator.from_specification(spec, max_steps=args.max_steps).generate()
    except TslError as e:
        print_tsl_error(err_console, e)
        return 1

    console.print(f"\n{result.to_summary_string()}", style="green", markup=False)

    # Only the input file given: show the summary and ask before writing
    if len(argv) == 1 and not args.yes:
        if not confirm(f"Write test frames to {destination} (y/N)? "):
            return 0

    try:
        write_output(render_listing(result, args.format), args.stdout, output_path)
    except OSError as e:
        err_console.print(f"Error: cannot write {output_path}: {e}", style="red", markup=False)
        return 1

    if not args.stdout:
        console.print(f"Test frames written to {output_path}", style="green", markup=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
