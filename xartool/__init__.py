"""
xartool
Reads XAR archives and verifies their table of contents and file digests.
"""
from .archive import Archive
from .errors import XarError, StructuralError, HeapReadError
from .verifier import Verifier, VerificationReport

__version__ = "0.1.0"

__all__ = [
    "Archive",
    "Verifier",
    "VerificationReport",
    "XarError",
    "StructuralError",
    "HeapReadError",
]
