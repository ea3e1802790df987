# km_tools/utils/resource_utils.py
import functools
import logging
import os
import time

import psutil

logger = logging.getLogger('km_tools')


def current_rss_mb():
    """Resident set size of this process in MB."""
    return psutil.Process(os.getpid()).memory_info().rss / (1024 * 1024)


def track_peak_memory(func):
    """
    Decorator logging wall time and memory of the wrapped call at DEBUG level.

    Memory is sampled before and after the call; with a streaming workload
    the two readings should stay close whatever the input size.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_mem = current_rss_mb()
        start_time = time.time()
        try:
            return func(*args, **kwargs)
        finally:
            end_mem = current_rss_mb()
            elapsed = time.time() - start_time
            logger.debug(
                f"{func.__name__}: {elapsed:.2f}s, memory {start_mem:.1f} MB -> {end_mem:.1f} MB "
                f"(delta {end_mem - start_mem:+.1f} MB)"
            )
    return wrapper
