# config/resolvers.py
from pathlib import Path
from typing import Optional

from platformdirs import user_log_dir

APP = "seqvec"

def default_log_dir() -> Path:
    return Path(user_log_dir(APP))

def _resolve_log_dir(*, log_dir: Optional[str], log_file: Optional[str]) -> Path:
    """
    Decide where this run's log file goes:
    - log_file given: its parent directory.
    - log_dir given: that directory.
    - neither: the per-user log directory.
    """
    if log_file:
        return Path(log_file).parent
    if log_dir:
        return Path(log_dir)
    return default_log_dir()

def _resolve_output_path(output_path: Optional[str], input_path: Path) -> Path:
    """
    Decide where the container goes when no output path is configured:
    next to the CSV, with the suffix dropped (``centroids.csv`` -> ``centroids``).
    """
    if output_path:
        return Path(output_path)
    if not input_path.suffix:
        raise ValueError(f"Cannot derive an output path from {input_path}: it has no suffix.")
    return input_path.with_suffix("")
