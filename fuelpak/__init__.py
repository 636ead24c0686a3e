"""Unpack FUEL archive object records to editable files and pack them back."""

__version__ = "0.1.0"