from .archive import Archive
from .header import decode_header, XAR_MAGIC, HEADER_LENGTH
from .heap import HeapReader
from .models import (
    Header,
    HeapRef,
    HeapData,
    Encoding,
    Checksum,
    Signature,
    FileKind,
    FileNode,
    RegularFile,
    Directory,
    UnknownNode,
)
from .toc import ManifestBuilder, TableOfContents

__all__ = [
    "Archive",
    "decode_header",
    "XAR_MAGIC",
    "HEADER_LENGTH",
    "HeapReader",
    "Header",
    "HeapRef",
    "HeapData",
    "Encoding",
    "Checksum",
    "Signature",
    "FileKind",
    "FileNode",
    "RegularFile",
    "Directory",
    "UnknownNode",
    "ManifestBuilder",
    "TableOfContents",
]
