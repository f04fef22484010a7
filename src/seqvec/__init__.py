"""CSV to Hadoop SequenceFile conversion and SequenceFile dumps."""

__version__ = "0.1.0"
