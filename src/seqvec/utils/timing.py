"""Phase timers for the import and dump runs"""
import logging
import time
from contextlib import contextmanager
from typing import Dict, Optional

def _now():
    return time.perf_counter()

@contextmanager
def section_timer(name: str, logger: logging.Logger, timings: Optional[Dict[str, float]] = None):
    """Time a named phase; the elapsed seconds are also stored in ``timings``."""
    t0 = _now()
    try:
        yield
    finally:
        dt = _now() - t0
        if timings is not None:
            timings[name] = dt
        logger.debug("TIMER %s took %.3f s", name, dt)
