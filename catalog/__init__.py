"""
Catalog Browse Engine

Faceted browsing (search, categorical, bit-flag and range filters, natural
multi-key sorting, pagination) over in-memory snapshots of catalog records,
plus the capability-flag model that gates each catalog screen.
"""

__version__ = "1.0.0"
