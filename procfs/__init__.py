"""Parsers for Linux /proc statistics and iSCSI target information in configfs."""

__version__ = "0.1.0"