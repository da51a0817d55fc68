"""
xartool Diagnostics
Non-fatal findings collected while opening an archive. Each one is
logged as a warning and kept on the archive so callers can render them.
"""
from typing import List, Optional
from .utils.logger import logger

BAD_MAGIC = 'bad-magic'
UNSUPPORTED_VERSION = 'unsupported-version'
UNSUPPORTED_CHECKSUM = 'unsupported-checksum'
TOC_LENGTH_MISMATCH = 'toc-length-mismatch'
TOC_PARSE_FAILED = 'toc-parse-failed'
INVALID_NUMBER = 'invalid-number'
TREE_SHAPE = 'tree-shape'
DUPLICATE_CHECKSUM = 'duplicate-checksum'
DUPLICATE_SIGNATURE = 'duplicate-signature'


class Diagnostic:
    __slots__ = ('code', 'message')

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"Diagnostic({self.code!r}, {self.message!r})"

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Diagnostic):
            return NotImplemented
        return (self.code, self.message) == (other.code, other.message)

    def to_dict(self) -> dict:
        return {'code': self.code, 'message': self.message}


class DiagnosticLog:
    """Ordered collection of diagnostics for one open() call"""

    def __init__(self, entries: Optional[List[Diagnostic]] = None):
        self.entries: List[Diagnostic] = list(entries or [])

    def warn(self, code: str, message: str) -> Diagnostic:
        diagnostic = Diagnostic(code, message)
        self.entries.append(diagnostic)
        logger.warning(message)
        return diagnostic

    def codes(self) -> List[str]:
        return [d.code for d in self.entries]

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)


__all__ = [
    "Diagnostic",
    "DiagnosticLog",
    "BAD_MAGIC",
    "UNSUPPORTED_VERSION",
    "UNSUPPORTED_CHECKSUM",
    "TOC_LENGTH_MISMATCH",
    "TOC_PARSE_FAILED",
    "INVALID_NUMBER",
    "TREE_SHAPE",
    "DUPLICATE_CHECKSUM",
    "DUPLICATE_SIGNATURE",
]
