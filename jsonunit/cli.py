"""Command line interface: compare two documents or run a folder of dataset cases."""

import argparse
import json
import logging
import sys

from .engine import Diff
from .exceptions import JsonUnitError
from .models import Configuration, Option
from .runner import DatasetRunner, load_configuration, load_document

EXIT_OK = 0
EXIT_DIFFERENT = 1
EXIT_ERROR = 2


def _comparison_arguments() -> argparse.ArgumentParser:
    """Options shared by every command that runs a comparison."""
    parent = argparse.ArgumentParser(add_help=False)
    group = parent.add_argument_group("comparison")
    group.add_argument("-c", "--config", help="YAML/JSON configuration file")
    group.add_argument(
        "-o", "--option",
        dest="options",
        action="append",
        default=[],
        choices=[o.value for o in Option],
        metavar="OPTION",
        help="Enable a comparison option (repeatable): %(choices)s"
    )
    group.add_argument("-t", "--tolerance", help="Allowed numeric difference, e.g. 0.01")
    group.add_argument(
        "-i", "--ignore-path",
        dest="ignored_paths",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Path or $-prefixed JSONPath to ignore (repeatable)"
    )
    parent.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parent


def build_parser() -> argparse.ArgumentParser:
    parent = _comparison_arguments()
    parser = argparse.ArgumentParser(
        prog="jsonunit",
        description="Semantic JSON comparison",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit status: 0 when everything matches, 1 on differences or failed
datasets, 2 on usage or configuration errors.

Examples:
  jsonunit compare expected.json actual.json -o ignoring-array-order
  jsonunit compare expected.json actual.json --path items[0] -t 0.01
  jsonunit datasets datasets/ -c jsonunit.yaml --report report.json
        """
    )
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    compare = commands.add_parser("compare", parents=[parent], help="Compare two JSON/YAML documents")
    compare.add_argument("expected", help="Expected document (may use placeholders)")
    compare.add_argument("actual", help="Actual document")
    target = compare.add_mutually_exclusive_group()
    target.add_argument("-p", "--path", default="", help="Path of the compared node within actual")
    target.add_argument("-j", "--jsonpath", help="JSONPath selecting the compared node(s) within actual")
    compare.add_argument("--json", action="store_true", help="Print the report as JSON")

    datasets = commands.add_parser("datasets", parents=[parent], help="Run a folder of dataset cases")
    datasets.add_argument("folder", help="Folder containing *.json / *.yaml case files")
    datasets.add_argument("-r", "--report", help="Write the JSON report to this file")
    datasets.add_argument("-q", "--quiet", action="store_true", help="Suppress console output")
    return parser


def build_configuration(args: argparse.Namespace) -> Configuration:
    """Configuration file settings, extended by the command line options."""
    configuration = load_configuration(args.config) if args.config else Configuration()
    builder = configuration.to_builder().with_options(*args.options)
    if args.tolerance is not None:
        builder.with_tolerance(args.tolerance)
    builder.when_ignoring_paths(*args.ignored_paths)
    return builder.build()


def _run_compare(args: argparse.Namespace, configuration: Configuration) -> int:
    expected = load_document(args.expected)
    actual = load_document(args.actual)
    if args.jsonpath:
        diff = Diff.in_path(args.jsonpath, expected, actual, configuration)
    else:
        diff = Diff(expected, actual, configuration, path=args.path)

    if args.json:
        print(json.dumps(diff.report().to_dict(), indent=2))
    elif diff.similar():
        print("JSON documents are equal")
    else:
        print(diff.differences_message(), end="")
    return EXIT_OK if diff.similar() else EXIT_DIFFERENT


def _run_datasets(args: argparse.Namespace, configuration: Configuration) -> int:
    report = DatasetRunner(configuration).run_folder(args.folder, print_report=not args.quiet)

    if args.report:
        with open(args.report, 'w') as f:
            json.dump(report.to_dict(), indent=2, fp=f)
        if not args.quiet:
            print(f"Report saved to: {args.report}")

    return EXIT_OK if report.failed == 0 else EXIT_DIFFERENT


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        configuration = build_configuration(args)
        if args.command == "compare":
            return _run_compare(args, configuration)
        return _run_datasets(args, configuration)
    except (JsonUnitError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
