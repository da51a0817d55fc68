"""
xartool Errors
Fatal conditions raised while opening or reading an archive.
Verification mismatches are never raised, they are collected
into a VerificationReport instead.
"""


class XarError(Exception):
    """Base class for everything xartool raises"""


class StructuralError(XarError):
    """The archive cannot be decoded: unreadable header, missing xar/toc elements"""


class HeaderError(StructuralError):
    """Header semantic check failed while strict header mode is enabled"""


class ManifestDecompressionError(StructuralError):
    """The compressed table of contents is not a valid zlib stream"""


class TreeShapeError(StructuralError):
    """A file node carries content that contradicts its declared type"""


class HeapReadError(XarError, IOError):
    """A seek or read against the archive source failed or came up short"""


class PayloadDecodeError(XarError):
    """A file payload could not be decoded according to its declared encoding"""


class UnsupportedEncodingError(PayloadDecodeError):
    """The payload uses an encoding style this tool has no decoder for"""


class IntegrityError(XarError):
    """Verification failed and the caller asked for a verified archive"""


class UnsafePathError(XarError, ValueError):
    """An entry name would escape the extraction directory"""


__all__ = [
    "XarError",
    "StructuralError",
    "HeaderError",
    "ManifestDecompressionError",
    "TreeShapeError",
    "HeapReadError",
    "PayloadDecodeError",
    "UnsupportedEncodingError",
    "IntegrityError",
    "UnsafePathError",
]
