# km_tools/filtering/engine.py
"""
Streaming k-mer matrix filter.

Lines are read, parsed, classified and (when retained) written one at a
time, so memory use does not depend on the number of rows. The only state
carried between rows is the sample count fixed by the first data row and the
running counters.
"""

import sys
import logging
from dataclasses import dataclass
from typing import BinaryIO, Iterable, Optional

from tqdm import tqdm

from km_tools.filtering.classifier import classify_row
from km_tools.filtering.parser import parse_row
from km_tools.filtering.thresholds import ThresholdConfig
from km_tools.logger import SUMMARY

logger = logging.getLogger('km_tools')

PROGRESS_INTERVAL = 1 << 20


@dataclass
class MatrixStreamState:
    """Mutable state of a single filtering run."""
    sample_count: Optional[int] = None
    rows_seen: int = 0
    rows_retained: int = 0

    @property
    def rows_dropped(self):
        return self.rows_seen - self.rows_retained


class ProgressReporter:
    """
    Reports progress every `interval` rows on stderr.

    When disabled it only keeps count of the reports it would have made.
    """

    def __init__(self, enabled=False, interval=PROGRESS_INTERVAL, stream=None):
        self.enabled = enabled
        self.interval = interval
        self.reports = 0
        self._bar = None
        if enabled:
            self._bar = tqdm(
                unit=" k-mers",
                unit_scale=True,
                file=stream if stream is not None else sys.stderr,
                desc="Filtering",
                mininterval=0,
            )

    def update(self, state: MatrixStreamState):
        if state.rows_seen % self.interval != 0:
            return
        self.reports += 1
        if not self.enabled:
            return
        self._bar.update(self.interval)
        self._bar.set_postfix(retained=state.rows_retained)
        logger.debug(f"{state.rows_seen} k-mers processed, {state.rows_retained} retrieved")

    def close(self):
        if self._bar is not None:
            self._bar.close()
            self._bar = None


class MatrixFilter:
    """
    Single-pass filter over the lines of a k-mer matrix.

    Args:
        config: Thresholds applied to every row
        output: Binary stream receiving retained lines verbatim
        progress: Optional ProgressReporter
    """

    def __init__(self, config: ThresholdConfig, output: BinaryIO,
                 progress: Optional[ProgressReporter] = None):
        self.config = config
        self.output = output
        self.progress = progress if progress is not None else ProgressReporter()
        self.state = MatrixStreamState()

    def process_line(self, line: bytes) -> bool:
        """
        Classify one raw line and write it out if it is retained.

        Blank lines are skipped without touching the state. Returns True if
        the line was written.
        """
        row = parse_row(line)
        if row is None:
            return False

        state = self.state
        if state.sample_count is None:
            state.sample_count = row.width
            logger.debug(f"Inferred {state.sample_count} samples from k-mer {row.identifier!r}")

        state.rows_seen += 1
        retained = classify_row(row, self.config, state.sample_count)
        if retained:
            state.rows_retained += 1
            self.output.write(row.raw)

        self.progress.update(state)
        return retained

    def run(self, lines: Iterable[bytes]) -> MatrixStreamState:
        try:
            for line in lines:
                self.process_line(line)
        finally:
            self.progress.close()
        return self.state


def log_summary(state: MatrixStreamState, log=None):
    """Report the end-of-run counters on the log, away from the data stream."""
    log = log or logger
    sample_count = state.sample_count if state.sample_count is not None else 0
    log.log(SUMMARY, f"{sample_count}\tsamples")
    log.log(SUMMARY, f"{state.rows_seen}\ttotal k-mers")
    log.log(SUMMARY, f"{state.rows_retained}\tretained k-mers")


def filter_matrix(lines: Iterable[bytes], output: BinaryIO,
                  config: Optional[ThresholdConfig] = None,
                  verbose: bool = False) -> MatrixStreamState:
    """
    Filter matrix lines into output and return the final run state.

    Args:
        lines: Iterable of raw lines (bytes, terminators included)
        output: Binary stream for retained lines
        config: Thresholds (defaults to ThresholdConfig())
        verbose: Show progress every PROGRESS_INTERVAL rows

    Returns:
        MatrixStreamState with the inferred sample count and counters
    """
    if config is None:
        config = ThresholdConfig()
    engine = MatrixFilter(config, output, ProgressReporter(enabled=verbose))
    return engine.run(lines)
