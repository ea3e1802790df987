"""File and resource helpers."""
