"""
xartool Payload Decoding
Turns stored heap bytes back into file content according to the
<encoding style="..."> declared for each entry.
"""
import bz2
import lzma
import zlib
from typing import Callable, Dict, Optional

from ..errors import PayloadDecodeError, UnsupportedEncodingError
from .models import Encoding, HeapData

OCTET_STREAM = 'application/octet-stream'


def _identity(data: bytes) -> bytes:
    return data


DECODERS: Dict[Optional[str], Callable[[bytes], bytes]] = {
    Encoding.GZIP.value: zlib.decompress,
    'application/x-bzip2': bz2.decompress,
    'application/x-lzma': lzma.decompress,
    'application/x-xz': lzma.decompress,
    OCTET_STREAM: _identity,
    # no <encoding> element at all means the payload is stored as is
    None: _identity,
}

DECODE_ERRORS = (zlib.error, OSError, EOFError, lzma.LZMAError, ValueError)


def decode_payload(data: HeapData, raw: bytes) -> bytes:
    """
    Decode raw heap bytes for one entry.

    Raises UnsupportedEncodingError for styles without a decoder and
    PayloadDecodeError when the stream itself is damaged.
    """
    style = Encoding.GZIP.value if data.encoding is Encoding.GZIP else data.encoding_style
    decoder = DECODERS.get(style)
    if decoder is None:
        raise UnsupportedEncodingError(f"Unsupported encoding {style}")
    try:
        return decoder(raw)
    except DECODE_ERRORS as e:
        raise PayloadDecodeError(str(e)) from e


__all__ = ["decode_payload", "DECODERS", "OCTET_STREAM"]
