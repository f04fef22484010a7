"""CSV to SequenceFile import, with an optional read-back check."""

import os
import sys
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, TextIO, Union

import numpy as np
import psutil
from tqdm import tqdm

from seqvec.config.integration import ImportConfig
from seqvec.container.sequence_file import (
    CompressionType,
    SequenceFileReader,
    SequenceFileWriter,
    SYNC_INTERVAL,
)
from seqvec.container.writables import TEXT_CLASS, VECTOR_CLASS
from seqvec.domain.exceptions import FileSystemError, VerificationError
from seqvec.domain.models import Record
from seqvec.formatting import format_entry
from seqvec.parsing.csv_records import read_records
from seqvec.utils.timing import section_timer

logger = logging.getLogger(__name__)
summary_logger = logging.getLogger("seqvec.summary")

@dataclass
class ImportResult:
    """Import execution result."""
    n_records: int
    n_written: int
    output_path: str
    n_verified: Optional[int] = None
    rss_mb: float = 0.0
    timings: Dict[str, float] = field(default_factory=dict)

def _sample_rss(process: psutil.Process, phase: str, peak_mb: float) -> float:
    """Return the larger of ``peak_mb`` and the current RSS in MB."""
    rss_mb = process.memory_info().rss / (1024 * 1024)
    logger.debug("RSS after %s: %.1f MB", phase, rss_mb)
    return max(peak_mb, rss_mb)

def _progress_enabled(requested: bool) -> bool:
    return requested and os.getenv('NO_PROGRESS', '').lower() not in ('1', 'true', 'yes')

def write_records(
    records: Sequence[Record],
    output_path: Union[str, Path],
    *,
    compression: CompressionType = CompressionType.NONE,
    sync_interval: int = SYNC_INTERVAL,
    sync_marker: Optional[bytes] = None,
    lax_precision: bool = False,
    metadata: Optional[Dict[str, str]] = None,
    show_progress: bool = False,
) -> int:
    """Write records as Text -> VectorWritable entries, in order. Returns the entry count."""
    with SequenceFileWriter(
        output_path,
        TEXT_CLASS,
        VECTOR_CLASS,
        compression=compression,
        sync_interval=sync_interval,
        sync_marker=sync_marker,
        metadata=metadata,
    ) as writer:
        for record in tqdm(
            records,
            desc="Writing",
            unit="rec",
            disable=not _progress_enabled(show_progress),
        ):
            vector = record.to_vector()
            vector.lax_precision = lax_precision
            writer.append(record.name, vector)
        return writer.count

def verify_container(
    records: Sequence[Record],
    output_path: Union[str, Path],
    out: Optional[TextIO] = None,
) -> int:
    """Re-read the container, echo each entry and compare it with the records written."""
    out = out if out is not None else sys.stdout
    seen = 0
    with SequenceFileReader(output_path, TEXT_CLASS, VECTOR_CLASS) as reader:
        for entry in reader:
            print(format_entry(entry.key, entry.value), file=out)
            if entry.index >= len(records):
                raise VerificationError(
                    f"Unexpected extra entry {entry.key!r} at position {entry.index}",
                    path=str(output_path),
                    expected_count=len(records),
                )
            record = records[entry.index]
            if entry.key != record.name or not np.array_equal(
                entry.value.values, np.asarray(record.features, dtype=np.float64), equal_nan=True
            ):
                raise VerificationError(
                    f"Entry {entry.index} does not match record {record.name!r}",
                    path=str(output_path),
                ).add_context('key', entry.key)
            seen += 1

    if seen != len(records):
        raise VerificationError(
            f"Container holds {seen} entries, expected {len(records)}",
            path=str(output_path),
            expected_count=len(records),
            actual_count=seen,
        )
    return seen

def run_import(config: ImportConfig, out: Optional[TextIO] = None) -> ImportResult:
    """Parse the CSV, write the container and optionally read it back."""
    timings: Dict[str, float] = {}
    process = psutil.Process(os.getpid())
    phase = "read"
    path = config.input_path

    try:
        with section_timer("parse", logger, timings):
            records: List[Record] = read_records(config.input_path, config.column_count)
        rss_mb = _sample_rss(process, "parse", 0.0)

        phase, path = "write", config.output_path
        with section_timer("write", logger, timings):
            written = write_records(
                records,
                config.output_path,
                compression=config.compression,
                sync_interval=config.sync_interval,
                sync_marker=config.sync_marker,
                lax_precision=config.lax_precision,
                metadata=config.metadata,
                show_progress=config.show_progress,
            )
        rss_mb = _sample_rss(process, "write", rss_mb)
        logger.info("Wrote %d entries to %s", written, config.output_path)

        verified = None
        if config.verify:
            phase = "verify"
            with section_timer("verify", logger, timings):
                verified = verify_container(records, config.output_path, out=out)
            rss_mb = _sample_rss(process, "verify", rss_mb)
            logger.info("Verified %d entries in %s", verified, config.output_path)

    except OSError as e:
        raise FileSystemError(
            f"Cannot {phase} {path}: {e.strerror or e}",
            path=str(path),
            operation=phase,
        ) from e

    result = ImportResult(
        n_records=len(records),
        n_written=written,
        output_path=str(config.output_path),
        n_verified=verified,
        rss_mb=rss_mb,
        timings=timings,
    )
    summary_logger.info(
        "Imported %d records into %s%s",
        result.n_records,
        result.output_path,
        "" if verified is None else f" ({verified} verified)",
    )
    return result
