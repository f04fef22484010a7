"""Import and dump runners."""

from .importer import ImportResult, run_import, write_records, verify_container
from .dumper import DumpResult, run_dump, dump_container

__all__ = [
    "ImportResult",
    "run_import",
    "write_records",
    "verify_container",
    "DumpResult",
    "run_dump",
    "dump_container",
]
