# km_tools/filtering/thresholds.py
"""
Threshold configuration for the k-mer matrix filter.

A row is retained when enough samples are absent (count == 0) and enough
samples are present (count >= min_abundance). Each of the two requirements
is either an absolute number of samples or a fraction of the total sample
count; a supplied fraction always wins over the absolute form.
"""

from dataclasses import dataclass
from typing import Optional, Union

DEFAULT_MIN_ABUNDANCE = 10
DEFAULT_MIN_ABSENT = 10
DEFAULT_MIN_PRESENT = 10

# Inclusive bounds accepted for fractional requirements
ABSENT_FRACTION_RANGE = (0.01, 0.99)
PRESENT_FRACTION_RANGE = (0.01, 0.95)


class ThresholdConfigError(ValueError):
    """Raised when a threshold option is outside its accepted interval."""


@dataclass(frozen=True)
class Absolute:
    """Requirement expressed as a fixed number of samples."""
    count: int

    def threshold(self, sample_count):
        return self.count

    def is_met(self, observed, sample_count):
        return observed >= self.count

    def describe(self):
        return f"{self.count} samples"


@dataclass(frozen=True)
class Fraction:
    """Requirement expressed as a proportion of the inferred sample count."""
    ratio: float

    def threshold(self, sample_count):
        return self.ratio * sample_count

    def is_met(self, observed, sample_count):
        # Real-valued comparison, no rounding of the threshold
        return observed >= self.ratio * sample_count

    def describe(self):
        return f"{self.ratio:g} of samples"


Requirement = Union[Absolute, Fraction]


def _check_fraction(value, bounds, option):
    low, high = bounds
    # NaN fails both comparisons and is rejected too
    if not (low <= value <= high):
        raise ThresholdConfigError(
            f"{option} must be in the [{low},{high}] interval (got {value})"
        )
    return Fraction(float(value))


@dataclass(frozen=True)
class ThresholdConfig:
    """
    Immutable filter thresholds shared by every row evaluation.

    Attributes:
        min_abundance: Minimum count for a sample to be called present
        absence: Requirement on the number of samples with a zero count
        presence: Requirement on the number of samples with count >= min_abundance
    """
    min_abundance: int = DEFAULT_MIN_ABUNDANCE
    absence: Requirement = Absolute(DEFAULT_MIN_ABSENT)
    presence: Requirement = Absolute(DEFAULT_MIN_PRESENT)

    @classmethod
    def from_options(cls,
                     min_abundance: int = DEFAULT_MIN_ABUNDANCE,
                     min_absent: int = DEFAULT_MIN_ABSENT,
                     min_absent_fraction: Optional[float] = None,
                     min_present: int = DEFAULT_MIN_PRESENT,
                     min_present_fraction: Optional[float] = None) -> "ThresholdConfig":
        """
        Build a configuration from command-line style options.

        Fractions are validated only when supplied; when supplied they replace
        the corresponding absolute count.

        Raises:
            ThresholdConfigError: if a fraction lies outside its interval
        """
        if min_absent_fraction is not None:
            absence = _check_fraction(min_absent_fraction, ABSENT_FRACTION_RANGE,
                                      "min absent fraction (-f)")
        else:
            absence = Absolute(int(min_absent))

        if min_present_fraction is not None:
            presence = _check_fraction(min_present_fraction, PRESENT_FRACTION_RANGE,
                                       "min present fraction (-F)")
        else:
            presence = Absolute(int(min_present))

        return cls(min_abundance=int(min_abundance), absence=absence, presence=presence)

    def describe(self):
        return (f"min abundance {self.min_abundance}, "
                f"absent in >= {self.absence.describe()}, "
                f"present in >= {self.presence.describe()}")
