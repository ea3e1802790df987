"""Streaming presence/absence filter for k-mer abundance matrices."""

from km_tools.filtering.thresholds import (
    Absolute,
    Fraction,
    ThresholdConfig,
    ThresholdConfigError,
)
from km_tools.filtering.parser import Row, parse_count, parse_row
from km_tools.filtering.classifier import RowCounts, classify_row, count_row
from km_tools.filtering.engine import (
    PROGRESS_INTERVAL,
    MatrixFilter,
    MatrixStreamState,
    ProgressReporter,
    filter_matrix,
    log_summary,
)
