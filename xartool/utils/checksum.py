"""
xartool Checksum Utility
Calculates hex digests for archive integrity verification.
"""
import hashlib
from typing import Union

DEFAULT_ALGORITHM = 'sha1'


def calculate_bytes_checksum(data: Union[bytes, str], algorithm: str = DEFAULT_ALGORITHM) -> str:
    """
    Calculates the checksum of a byte string or text string.

    Args:
        data: The input data (bytes or string)
        algorithm: hashlib algorithm name, SHA-1 unless told otherwise

    Returns:
        str: The lowercase hexadecimal hash string
    """
    if isinstance(data, str):
        data = data.encode('utf-8')

    digest = hashlib.new(algorithm)
    digest.update(data)
    return digest.hexdigest()


def normalize_digest(value: str) -> str:
    """Recorded digests are opaque hex; compare them without regard to case or padding"""
    return (value or '').strip().lower()


def digests_match(expected: str, actual: str) -> bool:
    return normalize_digest(expected) == normalize_digest(actual)


__all__ = [
    "calculate_bytes_checksum",
    "normalize_digest",
    "digests_match",
]
