"""Git File History - browse the revisions of a single file."""

__version__ = "0.1.0"
