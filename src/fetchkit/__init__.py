"""fetchkit - file lifecycle helpers for scheduled media downloads.

Provides exclusive file locking, free-space probing and age-based
retention sweeps for download directories.
"""

__version__ = "0.1.0"
