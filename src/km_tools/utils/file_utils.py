# km_tools/utils/file_utils.py
import sys
from contextlib import contextmanager

STDIO_PATH = '-'


class MatrixInputError(OSError):
    """The input matrix cannot be opened for reading."""


class MatrixOutputError(OSError):
    """The output destination cannot be opened for writing."""


@contextmanager
def open_matrix_input(path):
    """
    Open a matrix for binary line-by-line reading.

    '-' yields the standard input buffer, which is left open on exit.
    Any other path is opened before the caller sees a single line and
    closed on every exit path.

    Raises:
        MatrixInputError: if the path cannot be opened
    """
    if path == STDIO_PATH:
        yield sys.stdin.buffer
        return

    try:
        handle = open(path, 'rb')
    except OSError as e:
        raise MatrixInputError(f"cannot open file \"{path}\": {e.strerror or e}") from e

    try:
        yield handle
    finally:
        handle.close()


@contextmanager
def open_matrix_output(path=None):
    """
    Open the filtered matrix destination for binary writing.

    None or '-' yields the standard output buffer, which is flushed but never
    closed.

    Raises:
        MatrixOutputError: if the path cannot be opened
    """
    if path is None or path == STDIO_PATH:
        stream = sys.stdout.buffer
        try:
            yield stream
        finally:
            stream.flush()
        return

    try:
        handle = open(path, 'wb')
    except OSError as e:
        raise MatrixOutputError(f"cannot open output file \"{path}\": {e.strerror or e}") from e

    try:
        yield handle
    finally:
        handle.close()
