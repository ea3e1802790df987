# km_tools/filtering/classifier.py
"""
Presence/absence classification of matrix rows.

Counts strictly between 0 and min_abundance are present-but-low and count
toward neither the absent nor the present tally.
"""

from dataclasses import dataclass
from typing import Iterable

from km_tools.filtering.parser import Row
from km_tools.filtering.thresholds import ThresholdConfig


@dataclass(frozen=True)
class RowCounts:
    zero_count: int
    present_count: int


def count_row(abundances: Iterable[int], min_abundance: int) -> RowCounts:
    """Tally absent (== 0) and present (>= min_abundance) samples."""
    zero_count = 0
    present_count = 0
    for value in abundances:
        if value == 0:
            zero_count += 1
        elif value >= min_abundance:
            present_count += 1
    return RowCounts(zero_count, present_count)


def passes(counts: RowCounts, config: ThresholdConfig, sample_count: int) -> bool:
    """Apply both requirements to already tallied counts."""
    enough_absent = config.absence.is_met(counts.zero_count, sample_count)
    enough_present = config.presence.is_met(counts.present_count, sample_count)
    return enough_absent and enough_present


def classify_row(row: Row, config: ThresholdConfig, sample_count: int) -> bool:
    """
    Decide whether a row is potentially differential.

    Args:
        row: Parsed matrix row
        config: Active thresholds
        sample_count: Sample count inferred from the first data row; fractions
            are always taken of this value, not of the row's own width

    Returns:
        True if the row should be retained
    """
    counts = count_row(row.abundances, config.min_abundance)
    return passes(counts, config, sample_count)
