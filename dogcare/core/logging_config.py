"""
Logging setup: stdout only, one line per record.
"""
import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stdout handler to the `dogcare` logger tree."""
    root = logging.getLogger("dogcare")
    root.setLevel(level.upper())
    if not any(getattr(h, "_dogcare", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._dogcare = True  # type: ignore[attr-defined]
        root.addHandler(handler)
