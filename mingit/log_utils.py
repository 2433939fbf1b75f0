"""Logging utilities for mingit.

mingit is mostly used as a library, so the package logger carries a
null handler and stays silent until the CLI (or the embedding
application) configures logging. The core modules do not log; only the
command layer does.
"""

import logging
import os
import sys

getLogger = logging.getLogger

TRACE_ENV = 'MINGIT_TRACE'
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"

_NULL_HANDLER = logging.NullHandler()
_MINGIT_LOGGER = getLogger("mingit")
_MINGIT_LOGGER.addHandler(_NULL_HANDLER)


def _trace_target():
    """Read MINGIT_TRACE: None when off, 2 for stderr, otherwise a file path."""
    value = os.environ.get(TRACE_ENV, "")
    if not value or value.lower() in ("0", "false"):
        return None
    if value.lower() in ("1", "2", "true"):
        return 2
    if os.path.isabs(value):
        return value
    return None


def default_logging_config(level: int = logging.DEBUG) -> None:
    """Set up the default mingit loggers.

    Output goes to the file named by MINGIT_TRACE when it holds an
    absolute path, otherwise to stderr.
    """
    remove_null_handler()

    target = _trace_target()
    if isinstance(target, str):
        try:
            logging.basicConfig(level=level, filename=target, filemode="a", format=LOG_FORMAT)
            return
        except OSError as e:
            sys.stderr.write(f"Warning: Failed to open {TRACE_ENV} file {target}: {e}\n")
    logging.basicConfig(level=level, stream=sys.stderr, format=LOG_FORMAT)


def trace_enabled() -> bool:
    """Check if MINGIT_TRACE asks for debug output."""
    return _trace_target() is not None


def remove_null_handler() -> None:
    """Remove the null handler from the mingit logger."""
    _MINGIT_LOGGER.removeHandler(_NULL_HANDLER)
