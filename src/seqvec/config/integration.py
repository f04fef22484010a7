"""Run configurations handed to the import and dump runners."""
from typing import Optional, Dict
from dataclasses import dataclass, field
from pathlib import Path

from seqvec.config.settings import (
    Settings, get_settings, NUM_COLUMNS,
    DEFAULT_IMPORT_INPUT, DEFAULT_IMPORT_OUTPUT, DEFAULT_DUMP_INPUT,
)
from seqvec.container.sequence_file import CompressionType, SYNC_INTERVAL

@dataclass
class ImportConfig:
    """Everything one CSV import needs."""
    input_path: Path = DEFAULT_IMPORT_INPUT
    output_path: Path = DEFAULT_IMPORT_OUTPUT
    column_count: int = NUM_COLUMNS
    verify: bool = True
    compression: CompressionType = CompressionType.NONE
    sync_interval: int = SYNC_INTERVAL
    sync_marker: Optional[bytes] = None
    lax_precision: bool = False
    metadata: Dict[str, str] = field(default_factory=dict)
    show_progress: bool = False

    def __post_init__(self):
        self.input_path = Path(self.input_path)
        self.output_path = Path(self.output_path)

    @classmethod
    def from_settings(cls, settings: Settings) -> 'ImportConfig':
        """Create ImportConfig from Settings."""
        return cls(
            input_path=settings.importing.input_path,
            output_path=settings.importing.output_path,
            column_count=settings.importing.column_count,
            verify=settings.importing.verify,
            compression=settings.container.compression,
            sync_interval=settings.container.sync_interval,
            sync_marker=settings.container.sync_marker,
            lax_precision=settings.container.lax_precision,
            metadata=dict(settings.container.metadata),
            show_progress=settings.show_progress,
        )

@dataclass
class DumpConfig:
    """Everything one container dump needs."""
    input_path: Path = DEFAULT_DUMP_INPUT
    key_type: Optional[str] = "int"
    value_type: Optional[str] = "cluster"

    def __post_init__(self):
        self.input_path = Path(self.input_path)

    @classmethod
    def from_settings(cls, settings: Settings) -> 'DumpConfig':
        """Create DumpConfig from Settings."""
        return cls(
            input_path=settings.dumping.input_path,
            key_type=settings.dumping.key_type,
            value_type=settings.dumping.value_type,
        )

def get_import_config() -> ImportConfig:
    """Get ImportConfig from current settings."""
    return ImportConfig.from_settings(get_settings())

def get_dump_config() -> DumpConfig:
    """Get DumpConfig from current settings."""
    return DumpConfig.from_settings(get_settings())
