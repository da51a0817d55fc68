"""
xartool Archive
Owns the source handle, the decoded header and the parsed table of
contents. Created once through Archive.open(), then verified,
inspected or extracted, then closed.
"""
import os
import threading
from typing import BinaryIO, Iterator, List, Optional, Tuple, Union

from ..config import config as default_config, XarToolConfig
from ..diagnostics import Diagnostic, DiagnosticLog
from ..errors import StructuralError
from ..utils.logger import logger
from .header import decode_header
from .heap import HeapReader
from .models import Checksum, FileNode, Header, Signature, iter_files
from .toc import ManifestBuilder, TableOfContents

Source = Union[str, os.PathLike, BinaryIO]


class Archive:
    def __init__(
        self,
        source: BinaryIO,
        header: Header,
        toc: TableOfContents,
        diagnostics: List[Diagnostic],
        heap: HeapReader,
        name: str = None
    ):
        self._source = source
        self.header = header
        self.checksum: Optional[Checksum] = toc.checksum
        self.signature: Optional[Signature] = toc.signature
        self.files: Tuple[FileNode, ...] = toc.files
        self.diagnostics: Tuple[Diagnostic, ...] = tuple(diagnostics)
        self.heap = heap
        self.name = name

    @classmethod
    def open(
        cls,
        source: Source,
        strict: bool = None,
        strict_tree: bool = None,
        settings: XarToolConfig = None
    ) -> 'Archive':
        """
        Decode the header and table of contents of a XAR archive.

        source is a path or a seekable binary file object. Either way the
        archive takes ownership of the handle and closes it in close().
        strict and strict_tree override the configured header and tree
        strictness. Structural and I/O failures raise; everything else
        ends up in archive.diagnostics.
        """
        settings = settings or default_config
        if strict is None:
            strict = settings.strict_header
        if strict_tree is None:
            strict_tree = settings.strict_tree

        if isinstance(source, (str, os.PathLike)):
            name = str(source)
            handle = open(source, 'rb')
        else:
            name = getattr(source, 'name', None)
            handle = source
            if hasattr(handle, 'seekable') and not handle.seekable():
                raise StructuralError("Archive source must be seekable")

        try:
            logger.debug(f"Opening archive: {name or '<stream>'}")
            diagnostics = DiagnosticLog()
            header = decode_header(handle, diagnostics, strict=strict)

            heap = HeapReader(handle, header, threading.Lock())
            builder = ManifestBuilder(
                heap,
                diagnostics,
                strict_tree=strict_tree,
                strip_encoding_declaration=settings.strip_encoding_declaration
            )
            toc = builder.build()
        except Exception:
            handle.close()
            raise

        return cls(handle, header, toc, diagnostics.entries, heap, name=name)

    @property
    def heap_base(self) -> int:
        return self.header.heap_base

    @property
    def closed(self) -> bool:
        return self._source.closed

    def iter_files(self) -> Iterator[Tuple[str, FileNode]]:
        """(path, node) for every node, depth-first in document order"""
        return iter_files(self.files)

    def verify(self):
        from ..verifier.verifier import Verifier
        return Verifier().verify(self)

    def close(self):
        if not self._source.closed:
            self._source.close()

    def __enter__(self) -> 'Archive':
        return self

    def __exit__(self, *exc):
        self.close()

    def __repr__(self) -> str:
        return (
            f"Archive({self.name or '<stream>'!s}, files={len(self.files)}, "
            f"checksum={'yes' if self.checksum else 'no'}, "
            f"signature={'yes' if self.signature else 'no'})"
        )



__all__ = ["Archive"]
