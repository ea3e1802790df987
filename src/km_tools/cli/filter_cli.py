#!/usr/bin/env python3
"""
km-tools Basic Filter Module

Filters a k-mer abundance matrix (k-mers as rows, samples as columns) and
keeps the k-mers that are potentially differential between groups of samples.
"""

import os
import sys
import time
import logging
import argparse

from km_tools.logger import setup_logger
from km_tools.filtering.thresholds import (
    DEFAULT_MIN_ABUNDANCE,
    DEFAULT_MIN_ABSENT,
    DEFAULT_MIN_PRESENT,
    ThresholdConfig,
    ThresholdConfigError,
)
from km_tools.filtering.engine import MatrixFilter, ProgressReporter, log_summary
from km_tools.utils.file_utils import (
    MatrixInputError,
    MatrixOutputError,
    open_matrix_input,
    open_matrix_output,
)
from km_tools.utils.resource_utils import track_peak_memory

logger = logging.getLogger('km_tools')


def build_parser():
    """Build the argument parser for the basic filter."""
    parser = argparse.ArgumentParser(
        prog="km-basic-filter",
        description="Filter a matrix by selecting k-mers that are potentially differential.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Description:
  Each row of the input matrix is a k-mer followed by one abundance per sample,
  separated by spaces or tabs. A sample is "absent" when its count is 0 and
  "present" when its count is at least the minimum abundance (-a). A k-mer is
  retained when it is absent from enough samples AND present in enough samples.
  Retained rows are written unchanged and in input order, so the output is a
  valid matrix for downstream tools.

  The number of samples is inferred from the first non-empty line. Fractions
  (-f, -F) are taken of that number and override the absolute counts (-n, -N).

Common Usage:
  # Absolute thresholds, output to a file:
  km-basic-filter -a 5 -n 20 -N 20 -o filtered.mat counts.mat

  # Fractional thresholds, reading from stdin:
  zcat counts.mat.gz | km-basic-filter -f 0.5 -F 0.1 - > filtered.mat
"""
    )

    parser.add_argument("matrix",
                        help="Input k-mer matrix, or '-' to read standard input")

    parser.add_argument("-a", "--min-abundance", type=int, default=DEFAULT_MIN_ABUNDANCE, metavar="INT",
                        help=f"min abundance to define a k-mer as present in a sample [{DEFAULT_MIN_ABUNDANCE}]")
    parser.add_argument("-n", "--min-absent", type=int, default=DEFAULT_MIN_ABSENT, metavar="INT",
                        help=f"min number of samples for which a k-mer should be absent [{DEFAULT_MIN_ABSENT}]")
    parser.add_argument("-f", "--min-absent-fraction", type=float, default=None, metavar="FLOAT",
                        help="fraction of samples for which a k-mer should be absent (overrides -n)")
    parser.add_argument("-N", "--min-present", type=int, default=DEFAULT_MIN_PRESENT, metavar="INT",
                        help=f"min number of samples for which a k-mer should be present [{DEFAULT_MIN_PRESENT}]")
    parser.add_argument("-F", "--min-present-fraction", type=float, default=None, metavar="FLOAT",
                        help="fraction of samples for which a k-mer should be present (overrides -N)")
    parser.add_argument("-o", "--output", default=None, metavar="FILE",
                        help="output filtered matrix to FILE [stdout]")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="report progress every 2^20 k-mers")

    parser.add_argument("--log-file",
                        help="Path to log file")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Logging level")

    return parser


def parse_args(argv=None):
    """
    Parse command line arguments for the basic filter.

    -h/--help prints usage and exits 0 even when other options carry values
    that would fail conversion.
    """
    parser = build_parser()
    args_list = sys.argv[1:] if argv is None else list(argv)
    options = args_list[:args_list.index("--")] if "--" in args_list else args_list
    if "-h" in options or "--help" in options:
        parser.print_help()
        parser.exit(0)
    return parser.parse_args(args_list)


@track_peak_memory
def run_filter(matrix_path, output_path, config, verbose=False):
    """
    Stream matrix_path through the filter into output_path.

    Both destinations are released on every exit path; standard input and
    output are never closed.

    Returns:
        Final MatrixStreamState
    """
    with open_matrix_input(matrix_path) as matrix:
        with open_matrix_output(output_path) as output:
            engine = MatrixFilter(config, output, ProgressReporter(enabled=verbose))
            return engine.run(matrix)


def _silence_stdout():
    # Python flushes stdout again at exit; point it at devnull after a broken pipe
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())


def main(argv=None):
    """Main function to run the basic filter."""
    args = parse_args(argv)

    log_level = getattr(logging, args.log_level.upper())
    setup_logger(args.log_file, log_level)

    # Thresholds are validated before any file is touched
    try:
        config = ThresholdConfig.from_options(
            min_abundance=args.min_abundance,
            min_absent=args.min_absent,
            min_absent_fraction=args.min_absent_fraction,
            min_present=args.min_present,
            min_present_fraction=args.min_present_fraction,
        )
    except ThresholdConfigError as e:
        logger.error(str(e))
        return 1

    logger.debug(f"Filtering {args.matrix} with {config.describe()}")
    start_time = time.time()

    try:
        state = run_filter(args.matrix, args.output, config, verbose=args.verbose)
    except (MatrixInputError, MatrixOutputError) as e:
        logger.error(str(e))
        return 1
    except BrokenPipeError:
        _silence_stdout()
        logger.warning("Output stream closed before the matrix was fully filtered")
        return 0
    except OSError as e:
        logger.error(f"I/O error while filtering {args.matrix}: {e}")
        return 1

    log_summary(state, logger)

    elapsed_time = time.time() - start_time
    minutes, seconds = divmod(elapsed_time, 60)
    logger.debug(f"Total processing time: {int(minutes)}m {int(seconds)}s")

    return 0


if __name__ == "__main__":
    sys.exit(main())
