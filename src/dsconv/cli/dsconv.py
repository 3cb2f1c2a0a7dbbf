#!/usr/bin/env python3
"""
dsconv - Extract C array declarations and report or convert them.

Scans source files and/or inline code for declarations of the form
`type name[size] = {v0, v1, ...};`, prints metadata about each one, and can
re-emit the selected declarations as struct code.

Output modes:
  (default)         Metadata report on the console
  --log-file FILE   Copy of the report written to FILE
  --struct          Struct code after each report (to --output FILE if given)
  --jsonl FILE      One JSON object per selected declaration
"""

import argparse
import logging
import sys
from contextlib import ExitStack
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from dsconv.config import DSConvConfig, load_config
from dsconv.errors import DSConvError, EmitError, TargetError
from dsconv.export import JsonlExporter
from dsconv.report import LEGACY_WRAP_WIDTH, MetadataReporter
from dsconv.scanner import Matched, scan
from dsconv.selector import Selection, select
from dsconv.sinks import ConsoleSink, FileSink, Sink, TeeSink
from dsconv.struct_emit import emit_struct
from dsconv.summary import TargetStats, render_summary
from dsconv.targets import Target, file_target, inline_target

# Setup logging
logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='dsconv',
        description='Extract C array declarations and report or convert them',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Report every declaration in a file
  dsconv tables.c

  # Only the second declaration, as a flattened struct with initializers
  dsconv tables.c -n 2 --struct --flatten --iv

  # Inline code, report to a log file only
  dsconv -c 'int a[3] = {1,2,3};' -s -l report.log

  # Every declaration named "lut", struct code to a file
  dsconv tables.c -N lut --struct --ev -o lut_struct.c
        """
    )

    parser.add_argument(
        'files',
        nargs='*',
        type=Path,
        help='C source files to scan'
    )

    parser.add_argument(
        '-c', '--code',
        action='append',
        default=[],
        metavar='CODE',
        help='Inline code to scan (repeatable; scanned after the files)'
    )

    selection = parser.add_mutually_exclusive_group()
    selection.add_argument(
        '-n', '--index',
        type=int,
        metavar='N',
        help='Only the N-th declaration (1-based, counted per input)'
    )
    selection.add_argument(
        '-N', '--name',
        metavar='NAME',
        help='Only declarations with this exact identifier'
    )

    parser.add_argument(
        '-s', '--silent',
        action='store_true',
        default=None,
        help='Do not print the report to the console'
    )

    parser.add_argument(
        '-l', '--log-file',
        type=Path,
        help='Also write the report to this file'
    )

    parser.add_argument(
        '-o', '--output',
        type=Path,
        help='Write generated struct code to this file instead of the report'
    )

    parser.add_argument(
        '--struct',
        action='store_true',
        default=None,
        help='Generate struct code for each selected declaration'
    )

    parser.add_argument(
        '--flatten',
        action='store_true',
        help='One struct member per array element instead of one array member'
    )

    parser.add_argument(
        '--iv',
        action='store_true',
        help='Initialize struct members inline'
    )

    parser.add_argument(
        '--ev',
        action='store_true',
        help='Emit one assignment statement per element after the struct'
    )

    parser.add_argument(
        '--var-name',
        metavar='NAME',
        help='Name of the generated struct variable (default: s_var)'
    )

    parser.add_argument(
        '--wrap',
        type=int,
        nargs='?',
        const=LEGACY_WRAP_WIDTH,
        metavar='WIDTH',
        help=f'Wrap value lists at WIDTH columns (default when given: {LEGACY_WRAP_WIDTH})'
    )

    parser.add_argument(
        '--jsonl',
        type=Path,
        metavar='FILE',
        help='Write selected declarations as JSONL'
    )

    parser.add_argument(
        '--config',
        type=Path,
        metavar='YAML',
        help='Load options from a YAML config file (command-line flags win)'
    )

    parser.add_argument(
        '--summary',
        action='store_true',
        help='Print a per-input summary table to stderr'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    return parser


def resolve_config(args: argparse.Namespace) -> DSConvConfig:
    """Layer command-line flags over the config file (or defaults)."""
    config = load_config(args.config) if args.config else DSConvConfig()

    emit = config.emit
    if args.flatten:
        emit = replace(emit, wrap_member=False)
    if args.iv:
        emit = replace(emit, internal_init=True)
    if args.ev:
        emit = replace(emit, external_assign=True)

    return config.merged(
        silent=args.silent,
        log_file=args.log_file,
        output_file=args.output,
        jsonl_file=args.jsonl,
        generate_struct=args.struct,
        struct_var_name=args.var_name,
        wrap_width=args.wrap,
        emit=emit,
    )


class DSConvRunner:
    """Processes targets one at a time against a fixed config and selection."""

    def __init__(self, config: DSConvConfig, selection: Selection, report_sink: Sink,
                 code_sink: Sink, exporter: Optional[JsonlExporter] = None):
        self.config = config
        self.selection = selection
        self.code_sink = code_sink
        self.exporter = exporter
        self.reporter = MetadataReporter(
            report_sink,
            wrap_width=config.wrap_width,
            placeholder=config.placeholder,
        )
        self.stats: List[TargetStats] = []
        self.failures = 0

    def process(self, target: Target, show_heading: bool = False) -> int:
        """Scan one target and report its selected declarations."""
        if show_heading:
            self.reporter.begin_target(target.label)

        stats = TargetStats(label=target.label)
        selected = 0
        for matched in select(stats.tally(scan(target.text)), self.selection):
            self.reporter.report(matched)
            if self.config.generate_struct:
                self.emit(matched)
            if self.exporter is not None:
                self.exporter.write(matched, target.label)
            selected += 1

        if selected == 0:
            logger.info(f"No {self.selection.describe()} found in {target.label}")
        else:
            logger.debug(f"{target.label}: {selected} declaration(s) reported")

        stats.selected = selected
        self.stats.append(stats)
        return selected

    def emit(self, matched: Matched) -> None:
        try:
            code = emit_struct(
                matched.record,
                self.config.emit,
                var_name=self.config.struct_var_name,
                tag=self.config.struct_tag,
            )
        except EmitError as e:
            logger.error(f"Declaration #{matched.ordinal}: {e}")
            self.failures += 1
            return
        self.code_sink.write_block(code)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if not args.files and not args.code:
        logger.error("No input specified (give a file or --code)")
        return 1

    try:
        config = resolve_config(args)
        selection = Selection.from_options(index=args.index, name=args.name)
    except DSConvError as e:
        logger.error(str(e))
        return 1

    logger.debug(f"Options: {config.summary()}")

    multiple = len(args.files) + len(args.code) > 1
    failures = 0

    with ExitStack() as stack:
        report_sink = stack.enter_context(TeeSink())
        if not config.silent:
            report_sink.attach(ConsoleSink())
        if config.log_file:
            report_sink.attach(FileSink(config.log_file))

        code_sink: Sink = report_sink
        if config.generate_struct and config.output_file:
            code_sink = stack.enter_context(FileSink(config.output_file))

        exporter = None
        if config.jsonl_file:
            exporter = stack.enter_context(JsonlExporter(config.jsonl_file))

        runner = DSConvRunner(config, selection, report_sink, code_sink, exporter)

        for path in args.files:
            try:
                target = file_target(path)
            except TargetError as e:
                logger.error(str(e))
                failures += 1
                continue
            runner.process(target, show_heading=multiple)

        for number, code in enumerate(args.code, start=1):
            runner.process(inline_target(code, number), show_heading=multiple)

    if args.summary:
        Console(stderr=True).print(render_summary(runner.stats))

    return 1 if failures or runner.failures else 0


if __name__ == '__main__':
    sys.exit(main())
