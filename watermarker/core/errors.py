"""
Watermarker Errors
==================
Single error type raised for caller contract violations.
"""


class InvalidConfiguration(ValueError):
    """Raised when settings or inputs cannot produce a watermarked image."""
