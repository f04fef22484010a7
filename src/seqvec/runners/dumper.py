"""Print every entry of a SequenceFile as ``key , value`` lines."""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, TextIO, Dict, Union

from seqvec.config.integration import DumpConfig
from seqvec.container.sequence_file import SequenceFileReader
from seqvec.container.writables import resolve_class_name
from seqvec.domain.exceptions import FileSystemError
from seqvec.formatting import format_entry
from seqvec.utils.timing import section_timer

logger = logging.getLogger(__name__)
summary_logger = logging.getLogger("seqvec.summary")

@dataclass
class DumpResult:
    """Dump execution result."""
    input_path: str
    n_entries: int
    key_class: str
    value_class: str
    timings: Dict[str, float] = field(default_factory=dict)

def dump_container(
    path: Union[str, Path],
    key_type: Optional[str] = "auto",
    value_type: Optional[str] = "auto",
    out: Optional[TextIO] = None,
) -> DumpResult:
    """Write one ``key , value`` line per entry to ``out`` (stdout by default).

    ``key_type``/``value_type`` take an alias (``text``, ``int``, ``long``,
    ``vector``, ``cluster``), a Java class name or ``auto``; anything but
    ``auto`` must match the container header.
    """
    out = out if out is not None else sys.stdout
    count = 0
    with SequenceFileReader(
        path,
        expected_key_class=resolve_class_name(key_type),
        expected_value_class=resolve_class_name(value_type),
    ) as reader:
        for entry in reader:
            print(format_entry(entry.key, entry.value), file=out)
            count += 1
        header = reader.header
    return DumpResult(
        input_path=str(path),
        n_entries=count,
        key_class=header.key_class,
        value_class=header.value_class,
    )

def run_dump(config: DumpConfig, out: Optional[TextIO] = None) -> DumpResult:
    """Dump the container named by ``config``."""
    timings: Dict[str, float] = {}
    logger.info("Dumping %s (key=%s, value=%s)", config.input_path, config.key_type, config.value_type)
    try:
        with section_timer("dump", logger, timings):
            result = dump_container(
                config.input_path,
                key_type=config.key_type,
                value_type=config.value_type,
                out=out,
            )
    except OSError as e:
        raise FileSystemError(
            f"Cannot read container {config.input_path}: {e.strerror or e}",
            path=str(config.input_path),
            operation="read",
        ) from e

    result.timings = timings
    summary_logger.info(
        "Dumped %d entries from %s (%s -> %s)",
        result.n_entries, result.input_path, result.key_class, result.value_class,
    )
    return result
