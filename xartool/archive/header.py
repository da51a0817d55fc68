"""
xartool Header Decoder
Decodes the fixed big-endian preamble of a XAR archive.
"""
import struct
from typing import BinaryIO
from ..diagnostics import DiagnosticLog, BAD_MAGIC, UNSUPPORTED_VERSION, UNSUPPORTED_CHECKSUM
from ..errors import StructuralError, HeaderError
from .models import Header

XAR_MAGIC = 0x78617221
XAR_VERSION = 1

XAR_CHECKSUM_NONE = 0
XAR_CHECKSUM_SHA1 = 1
XAR_CHECKSUM_MD5 = 2
XAR_CHECKSUM_OTHER = 3

# magic | header size | version | toc compressed | toc uncompressed | checksum id
HEADER_FORMAT = '>IHHQQI'
HEADER_LENGTH = struct.calcsize(HEADER_FORMAT)


def decode_header(source: BinaryIO, diagnostics: DiagnosticLog = None, strict: bool = False) -> Header:
    """
    Read the preamble from the start of the source.

    Only an unreadable or short preamble is fatal. A wrong magic, version
    or checksum algorithm becomes a diagnostic and decoding carries on,
    unless strict is set, in which case HeaderError is raised.
    """
    if diagnostics is None:
        diagnostics = DiagnosticLog()

    try:
        source.seek(0)
        raw = source.read(HEADER_LENGTH)
    except OSError as e:
        raise StructuralError(f"Failed to read archive header: {e}") from e

    if raw is None or len(raw) < HEADER_LENGTH:
        got = 0 if raw is None else len(raw)
        raise StructuralError(
            f"Truncated archive header: expected {HEADER_LENGTH} bytes, got {got}"
        )

    header = Header(*struct.unpack(HEADER_FORMAT, raw))

    problems = []
    if header.magic != XAR_MAGIC:
        problems.append((BAD_MAGIC, f"not a XAR archive (magic 0x{header.magic:08x})"))
    if header.version != XAR_VERSION:
        problems.append((UNSUPPORTED_VERSION, f"unsupported archive version {header.version}"))
    if header.checksum_algorithm != XAR_CHECKSUM_SHA1:
        problems.append((UNSUPPORTED_CHECKSUM, f"unsupported checksum type {header.checksum_algorithm}"))

    if strict and problems:
        raise HeaderError("; ".join(message for _, message in problems))

    for code, message in problems:
        diagnostics.warn(code, message)

    return header


__all__ = [
    "XAR_MAGIC",
    "XAR_VERSION",
    "XAR_CHECKSUM_SHA1",
    "HEADER_FORMAT",
    "HEADER_LENGTH",
    "decode_header",
]
