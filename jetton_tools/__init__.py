"""Jetton metadata and allocation toolkit.

Builds and parses the cell-tree payloads used for jetton content metadata,
and computes the exact integer supply split used for the one-time initial
allocation mint.
"""

__version__ = "0.1.0"
