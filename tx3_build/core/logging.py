import logging
import sys
from typing import Optional

# Extra fields every tx3 log line carries; "-" when a record has none
CONTEXT_FIELDS = ("phase", "output_dir")

LOG_FORMAT = (
    "%(asctime)s %(levelname)s %(name)s "
    "[phase=%(phase)s output_dir=%(output_dir)s] - %(message)s"
)


class ContextFormatter(logging.Formatter):
    """Formatter that fills in the build phase and output dir when a record lacks them."""
    def format(self, record):
        for field in CONTEXT_FIELDS:
            if not hasattr(record, field):
                setattr(record, field, "-")
        return super().format(record)


def log_context(phase, output_dir=None) -> dict:
    """The `extra` mapping for a record emitted during a build phase."""
    return {
        "phase": getattr(phase, "value", phase),
        "output_dir": "-" if output_dir is None else str(output_dir),
    }


def configure_logging(level: str = "INFO", stream=None) -> logging.Handler:
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(ContextFormatter(LOG_FORMAT))
    numeric = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric, handlers=[handler])
    # httpx logs every request line at INFO; only show it when debugging
    if numeric > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
    return handler
