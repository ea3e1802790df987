import io
import logging

import pytest

from km_tools.filtering.engine import (
    PROGRESS_INTERVAL,
    MatrixFilter,
    MatrixStreamState,
    ProgressReporter,
    filter_matrix,
    log_summary,
)
from km_tools.filtering.thresholds import ThresholdConfig

SCENARIO_A = ThresholdConfig.from_options(min_abundance=10, min_absent=2, min_present=2)
SCENARIO_B = ThresholdConfig.from_options(min_abundance=10, min_absent_fraction=0.5,
                                          min_present_fraction=0.3)


def run(content, config):
    out = io.BytesIO()
    state = filter_matrix(io.BytesIO(content).readlines(), out, config)
    return state, out.getvalue()


@pytest.mark.parametrize("config", [SCENARIO_A, SCENARIO_B])
def test_end_to_end_scenarios(scenario_matrix, config):
    state, output = run(scenario_matrix, config)
    assert output == b"kmerA 0 0 0 50 60\n"
    assert state == MatrixStreamState(sample_count=5, rows_seen=2, rows_retained=1)
    assert state.rows_dropped == 1


def test_retained_lines_are_byte_identical():
    content = b"kmerA\t0  0 \t0 50 60 \r\nkmerB 10 10 10 10 10\nkmerC 0 0 0 99 99"
    state, output = run(content, SCENARIO_A)
    assert output == b"kmerA\t0  0 \t0 50 60 \r\nkmerC 0 0 0 99 99"
    assert state.rows_retained == 2


def test_output_preserves_input_order():
    lines = [f"k{i} 0 0 0 {50 + i} {60 + i}\n".encode() for i in range(20)]
    lines[7] = b"k7 10 10 10 10 10\n"
    _, output = run(b"".join(lines), SCENARIO_A)
    expected = b"".join(line for i, line in enumerate(lines) if i != 7)
    assert output == expected


def test_blank_lines_are_ignored_even_first():
    content = b"\n   \n\t\nkmerA 0 0 0 50 60\n\nkmerB 10 10 10 10 10\n\n"
    state, output = run(content, SCENARIO_A)
    assert output == b"kmerA 0 0 0 50 60\n"
    assert state == MatrixStreamState(sample_count=5, rows_seen=2, rows_retained=1)


def test_sample_count_fixed_by_first_row():
    config = ThresholdConfig.from_options(min_abundance=1, min_absent_fraction=0.5,
                                          min_present_fraction=0.1)
    # Wider second row: 3 zeros >= 0.5 * 4 with the first row's width
    content = b"k1 0 0 5 5\nk2 0 0 0 5 5 5 5 5 5 5\nk3 0 5\n"
    state, output = run(content, config)
    assert state.sample_count == 4
    # k3 has a single zero, below 0.5 * 4
    assert output == b"k1 0 0 5 5\nk2 0 0 0 5 5 5 5 5 5 5\n"


def test_identifier_only_first_row_fixes_zero_samples():
    config = ThresholdConfig.from_options(min_abundance=1, min_absent_fraction=0.5,
                                          min_present_fraction=0.5)
    state, output = run(b"kmer\nk2 0 3\n", config)
    assert state.sample_count == 0
    assert state.rows_seen == 2
    # with zero samples every fractional threshold is 0
    assert output == b"kmer\nk2 0 3\n"


def test_increasing_min_abundance_shrinks_retained_set():
    content = b"".join(f"k{i} 0 0 {i} {2 * i} {3 * i}\n".encode() for i in range(1, 30))
    retained = []
    for min_abundance in (1, 5, 10, 20, 40, 100):
        config = ThresholdConfig.from_options(min_abundance=min_abundance, min_absent=2, min_present=2)
        _, output = run(content, config)
        retained.append(set(output.splitlines()))
    for larger, smaller in zip(retained, retained[1:]):
        assert smaller <= larger


def test_empty_input():
    state, output = run(b"", SCENARIO_A)
    assert output == b""
    assert state == MatrixStreamState()


def test_process_line_reports_retention():
    out = io.BytesIO()
    engine = MatrixFilter(SCENARIO_A, out)
    assert engine.process_line(b"kmerA 0 0 0 50 60\n") is True
    assert engine.process_line(b"\n") is False
    assert engine.process_line(b"kmerB 10 10 10 10 10\n") is False
    assert engine.state.rows_seen == 2


def test_progress_fires_every_interval_regardless_of_outcome():
    reporter = ProgressReporter(enabled=False, interval=4)
    engine = MatrixFilter(SCENARIO_A, io.BytesIO(), reporter)
    lines = [b"kmerB 10 10 10 10 10\n"] * 9 + [b"\n"] * 5 + [b"kmerA 0 0 0 50 60\n"] * 3
    engine.run(lines)
    assert engine.state.rows_seen == 12
    assert reporter.reports == 3


def test_default_progress_interval():
    assert PROGRESS_INTERVAL == 2 ** 20


def test_verbose_progress_goes_to_side_channel(caplog):
    side = io.StringIO()
    reporter = ProgressReporter(enabled=True, interval=2, stream=side)
    out = io.BytesIO()
    with caplog.at_level(logging.DEBUG, logger="km_tools"):
        MatrixFilter(SCENARIO_A, out, reporter).run([b"kmerA 0 0 0 50 60\n"] * 4)
    assert out.getvalue() == b"kmerA 0 0 0 50 60\n" * 4
    assert reporter.reports == 2
    assert "4 k-mers processed, 4 retrieved" in caplog.text
    assert side.getvalue() != ""


def test_log_summary(caplog):
    state = MatrixStreamState(sample_count=5, rows_seen=2, rows_retained=1)
    with caplog.at_level(logging.INFO, logger="km_tools"):
        log_summary(state)
    assert caplog.messages == ["5\tsamples", "2\ttotal k-mers", "1\tretained k-mers"]


def test_log_summary_without_rows(caplog):
    with caplog.at_level(logging.INFO, logger="km_tools"):
        log_summary(MatrixStreamState())
    assert caplog.messages[0] == "0\tsamples"


def test_log_summary_uses_summary_level(caplog):
    from km_tools.logger import SUMMARY

    with caplog.at_level(logging.CRITICAL, logger="km_tools"):
        log_summary(MatrixStreamState(sample_count=3, rows_seen=4, rows_retained=2))
    assert [record.levelno for record in caplog.records] == [SUMMARY] * 3
    assert caplog.records[0].levelname == "SUMMARY"
