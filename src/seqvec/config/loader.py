"""Configuration loading from CLI and programmatic sources."""

import logging
from pathlib import Path
from dataclasses import replace
from seqvec.config.settings import (
    Settings, ImportSettings, DumpSettings, ContainerSettings,
    LoggingSettings, LogLevel, Command, parse_sync_marker,
    DEFAULT_IMPORT_INPUT, DEFAULT_IMPORT_OUTPUT, DEFAULT_DUMP_INPUT, NUM_COLUMNS,
)
from seqvec.config.resolvers import _resolve_output_path
from seqvec.container.sequence_file import CompressionType, SYNC_INTERVAL
from seqvec.domain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

class ConfigurationLoader:
    """Loads configuration from CLI args and built-in defaults."""

    def load_from_cli_args(self, args) -> Settings:
        """Load configuration from CLI arguments."""
        try:
            # Start with built-in defaults
            settings = self.load_defaults()
            command = Command(getattr(args, 'cmd', None) or Command.IMPORT.value)

            input_path = getattr(args, 'input', None)
            output_path = getattr(args, 'output', None)

            # Import settings updates
            import_updates = {}
            if command is Command.IMPORT:
                if input_path:
                    import_updates['input_path'] = Path(input_path)
                    import_updates['output_path'] = _resolve_output_path(
                        output_path, Path(input_path)
                    )
                elif output_path:
                    import_updates['output_path'] = Path(output_path)
                if getattr(args, 'columns', None) is not None:
                    import_updates['column_count'] = args.columns
                if getattr(args, 'no_verify', False):
                    import_updates['verify'] = False

            # Dump settings updates
            dump_updates = {}
            if command is Command.DUMP:
                if input_path:
                    dump_updates['input_path'] = Path(input_path)
                if getattr(args, 'key_type', None):
                    dump_updates['key_type'] = args.key_type
                if getattr(args, 'value_type', None):
                    dump_updates['value_type'] = args.value_type

            # Container settings updates
            container_updates = {}
            if getattr(args, 'compression', None):
                container_updates['compression'] = CompressionType(args.compression)
            if getattr(args, 'sync_interval', None) is not None:
                container_updates['sync_interval'] = args.sync_interval
            if getattr(args, 'sync_marker', None):
                container_updates['sync_marker'] = parse_sync_marker(args.sync_marker)
            if getattr(args, 'lax_precision', False):
                container_updates['lax_precision'] = True

            # Logging settings updates
            logging_updates = {}
            if getattr(args, 'log_file', None):
                logging_updates['file_path'] = Path(args.log_file)
            if getattr(args, 'log_dir', None):
                logging_updates['log_dir'] = Path(args.log_dir)
            if getattr(args, 'debug', False):
                logging_updates['level'] = LogLevel.DEBUG

            return replace(
                settings,
                command=command,
                importing=replace(settings.importing, **import_updates),
                dumping=replace(settings.dumping, **dump_updates),
                container=replace(settings.container, **container_updates),
                logging=replace(settings.logging, **logging_updates),
                debug_mode=getattr(args, 'debug', False),
                show_progress=not getattr(args, 'no_progress', False),
                dry_run=getattr(args, 'dry_run', False),
            )

        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(
                f"Failed to load configuration from CLI arguments: {str(e)}"
            ) from e

    def load_defaults(self) -> Settings:
        """Load default configuration settings."""
        return Settings(
            command=Command.IMPORT,
            importing=ImportSettings(
                input_path=DEFAULT_IMPORT_INPUT,
                output_path=DEFAULT_IMPORT_OUTPUT,
                column_count=NUM_COLUMNS,
                verify=True,
            ),
            dumping=DumpSettings(
                input_path=DEFAULT_DUMP_INPUT,
                key_type="int",
                value_type="cluster",
            ),
            container=ContainerSettings(
                compression=CompressionType.NONE,
                sync_interval=SYNC_INTERVAL,
                sync_marker=None,
                lax_precision=False,
            ),
            logging=LoggingSettings(
                level=LogLevel.INFO,
                file_path=None,
                log_dir=None,
                console_output=True,
            ),
            debug_mode=False,
            show_progress=True,
            dry_run=False,
        )

def configure_from_cli(args) -> Settings:
    """Main entry point to configure settings from CLI args."""
    loader = ConfigurationLoader()
    settings = loader.load_from_cli_args(args)
    settings.validate()
    return settings
