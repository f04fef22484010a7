"""Core configuration settings for seqvec."""

import logging
import re
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, field
from enum import Enum

from seqvec.container.sequence_file import CompressionType, SYNC_INTERVAL, SYNC_HASH_SIZE
from seqvec.container.writables import ALIASES
from seqvec.domain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_IMPORT_INPUT = Path("/ZTE_Demo/SKM_Iterations/centroids.csv")
DEFAULT_IMPORT_OUTPUT = Path("/ZTE_Demo/SKM_Iterations/centroids")
DEFAULT_DUMP_INPUT = Path("/ZTE_Demo/cluster_raw")
NUM_COLUMNS = 4

WRITABLE_CHOICES = tuple(sorted(ALIASES)) + ("auto",)

class LogLevel(Enum):
    """Supported logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

class Command(Enum):
    """Programs the tool can run."""
    IMPORT = "import"
    DUMP = "dump"

@dataclass
class ImportSettings:
    """CSV import configuration."""
    input_path: Path = DEFAULT_IMPORT_INPUT
    output_path: Path = DEFAULT_IMPORT_OUTPUT
    column_count: int = NUM_COLUMNS
    verify: bool = True

    def validate(self) -> None:
        """Validate import settings."""
        if self.column_count < 1:
            raise ConfigurationError(
                "column_count must be at least 1",
                config_field="importing.column_count"
            ).add_suggestion("Count the name column plus every feature column")

        if not self.input_path.is_file():
            raise ConfigurationError(
                f"Input CSV does not exist: {self.input_path}",
                config_field="importing.input_path"
            ).add_suggestion("Pass --input with an existing CSV file")

        if self.output_path.exists() and self.output_path.is_dir():
            raise ConfigurationError(
                f"Output path is a directory: {self.output_path}",
                config_field="importing.output_path"
            )

@dataclass
class DumpSettings:
    """Container dump configuration."""
    input_path: Path = DEFAULT_DUMP_INPUT
    key_type: str = "int"
    value_type: str = "cluster"

    def validate(self) -> None:
        """Validate dump settings."""
        for name in ("key_type", "value_type"):
            value = getattr(self, name)
            if value not in WRITABLE_CHOICES:
                raise ConfigurationError(
                    f"Invalid {name}: {value}",
                    config_field=f"dumping.{name}"
                ).add_suggestion(f"Use one of: {', '.join(WRITABLE_CHOICES)}")

        if not self.input_path.is_file():
            raise ConfigurationError(
                f"Container does not exist: {self.input_path}",
                config_field="dumping.input_path"
            ).add_suggestion("Pass --input with an existing SequenceFile")

@dataclass
class ContainerSettings:
    """SequenceFile writer configuration."""
    compression: CompressionType = CompressionType.NONE
    sync_interval: int = SYNC_INTERVAL
    sync_marker: Optional[bytes] = None
    lax_precision: bool = False
    metadata: Dict[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        """Validate container settings."""
        if self.sync_interval <= 0:
            raise ConfigurationError(
                "sync_interval must be positive",
                config_field="container.sync_interval"
            )

        if self.sync_marker is not None and len(self.sync_marker) != SYNC_HASH_SIZE:
            raise ConfigurationError(
                f"sync_marker must be {SYNC_HASH_SIZE} bytes, got {len(self.sync_marker)}",
                config_field="container.sync_marker"
            ).add_suggestion(f"Pass {SYNC_HASH_SIZE * 2} hex digits")

def parse_sync_marker(text: Optional[str]) -> Optional[bytes]:
    """Parse a hex sync marker from the command line."""
    if not text:
        return None
    if not re.fullmatch(r"[0-9a-fA-F]{%d}" % (SYNC_HASH_SIZE * 2), text):
        raise ConfigurationError(
            f"Invalid sync marker: {text}",
            config_field="container.sync_marker"
        ).add_suggestion(f"Pass exactly {SYNC_HASH_SIZE * 2} hex digits")
    return bytes.fromhex(text)

@dataclass
class LoggingSettings:
    """Logging configuration."""
    level: LogLevel = LogLevel.INFO
    file_path: Optional[Path] = None
    log_dir: Optional[Path] = None
    console_output: bool = True
    format_string: str = "{asctime} {levelname:<7} {name} - {message}"

    def validate(self) -> None:
        """Validate logging settings."""
        if self.file_path and not self.file_path.parent.exists():
            raise ConfigurationError(
                f"Log directory does not exist: {self.file_path.parent}",
                config_field="logging.file_path"
            ).add_suggestion("Create the directory or use console logging only")

@dataclass
class Settings:
    """Main configuration settings for seqvec."""

    command: Command = Command.IMPORT
    importing: ImportSettings = field(default_factory=ImportSettings)
    dumping: DumpSettings = field(default_factory=DumpSettings)
    container: ContainerSettings = field(default_factory=ContainerSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    # Debug/development settings
    debug_mode: bool = False
    show_progress: bool = True
    dry_run: bool = False

    def validate(self) -> None:
        """Validate the settings the selected command uses."""
        try:
            if self.command is Command.IMPORT:
                self.importing.validate()
                self.container.validate()
            else:
                self.dumping.validate()
            self.logging.validate()

        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(
                f"Configuration validation failed: {str(e)}"
            ) from e

    def to_dict(self) -> dict:
        """Convert settings to dictionary for debugging."""
        return {
            'command': self.command.value,
            'importing': {
                'input_path': str(self.importing.input_path),
                'output_path': str(self.importing.output_path),
                'column_count': self.importing.column_count,
                'verify': self.importing.verify,
            },
            'dumping': {
                'input_path': str(self.dumping.input_path),
                'key_type': self.dumping.key_type,
                'value_type': self.dumping.value_type,
            },
            'container': {
                'compression': self.container.compression.value,
                'sync_interval': self.container.sync_interval,
                'sync_marker': self.container.sync_marker.hex() if self.container.sync_marker else None,
                'lax_precision': self.container.lax_precision,
            },
            'runtime': {
                'log_level': self.logging.level.value,
                'debug_mode': self.debug_mode,
                'dry_run': self.dry_run,
            }
        }

# Global settings instance
_settings: Optional[Settings] = None

def get_settings() -> Settings:
    """Get the current global settings instance."""
    if _settings is None:
        raise ConfigurationError(
            "Settings not initialized. Call set_settings() first."
        ).add_suggestion("Initialize settings in your application startup")
    return _settings

def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    settings.validate()
    _settings = settings
    logger.debug("Configuration loaded and validated successfully")

def reset_settings() -> None:
    """Forget the global settings instance."""
    global _settings
    _settings = None
