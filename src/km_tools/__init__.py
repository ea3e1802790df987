# km_tools/__init__.py
"""
km-tools - Filtering of k-mer abundance matrices.

Rows (k-mers) of a sample-by-k-mer count matrix are kept only when they are
absent from enough samples and present in enough others, which makes them
candidates for discriminating between groups of samples. The matrix is
streamed, so arbitrarily large inputs can be filtered in constant memory.
"""

__version__ = "0.1.0"

from km_tools.logger import setup_logger

from km_tools.filtering import (
    Absolute,
    Fraction,
    MatrixFilter,
    MatrixStreamState,
    ThresholdConfig,
    ThresholdConfigError,
    filter_matrix,
)
