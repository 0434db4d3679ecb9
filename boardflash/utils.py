# utils.py
import sys
import logging


def write_log(stream, message: str, is_error: bool = False) -> None:
    """Print one status/log line; errors always go to stderr."""
    out = sys.stderr if is_error else (stream or sys.stdout)
    prefix = "error: " if is_error else ""
    out.write(prefix + (message or "").rstrip() + "\n")
    out.flush()


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
