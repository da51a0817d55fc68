"""
xartool Manifest Builder
Decompresses the table of contents, parses the XML and turns it into
typed entities. Checksum and signature blobs are loaded from the heap
eagerly; file payloads are only located, never read here.
"""
import zlib
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from xml.etree.ElementTree import Element

from ..diagnostics import (
    DiagnosticLog,
    TOC_LENGTH_MISMATCH,
    TOC_PARSE_FAILED,
    TREE_SHAPE,
    DUPLICATE_CHECKSUM,
    DUPLICATE_SIGNATURE,
)
from ..errors import StructuralError, ManifestDecompressionError, TreeShapeError
from ..utils.logger import logger
from ..utils.xml import (
    PARSE_ERRORS,
    parse_document,
    local_name,
    child_elements,
    find_child,
    element_text,
    child_text,
    child_int,
    attribute,
)
from .heap import HeapReader
from .models import (
    Checksum,
    Directory,
    Encoding,
    FileKind,
    FileNode,
    HeapData,
    HeapRef,
    RegularFile,
    Signature,
    UnknownNode,
)

ENCODING_DECLARATION = 'encoding="UTF-8"'


@dataclass(frozen=True)
class TableOfContents:
    checksum: Optional[Checksum] = None
    signature: Optional[Signature] = None
    files: Tuple[FileNode, ...] = field(default_factory=tuple)


class ManifestBuilder:
    def __init__(
        self,
        heap: HeapReader,
        diagnostics: DiagnosticLog = None,
        strict_tree: bool = False,
        strip_encoding_declaration: bool = True
    ):
        self.heap = heap
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
        self.strict_tree = strict_tree
        self.strip_encoding_declaration = strip_encoding_declaration

    def build(self) -> TableOfContents:
        raw = self.heap.read_toc()
        text = self.decompress(raw)
        root = self.parse(text)

        if root is None or local_name(root) != 'xar':
            raise StructuralError("Manifest has no <xar> root element")
        toc = find_child(root, 'toc')
        if toc is None:
            raise StructuralError("Manifest has no <toc> element under <xar>")

        checksum = None
        signature = None
        files: List[FileNode] = []

        for child in child_elements(toc):
            tag = local_name(child)
            if tag == 'checksum':
                if checksum is not None:
                    self.diagnostics.warn(DUPLICATE_CHECKSUM, "manifest declares more than one checksum, using the last")
                checksum = self.parse_checksum(child)
            elif tag == 'signature':
                if signature is not None:
                    self.diagnostics.warn(DUPLICATE_SIGNATURE, "manifest declares more than one signature, using the last")
                signature = self.parse_signature(child)
            elif tag == 'file':
                files.append(self.parse_file(child))
            else:
                logger.debug(f"Ignoring <{tag}> in table of contents")

        return TableOfContents(checksum=checksum, signature=signature, files=tuple(files))

    # ── Manifest text ──────────────────────────────────────────────────────

    def decompress(self, raw: bytes) -> str:
        try:
            data = zlib.decompress(raw)
        except zlib.error as e:
            raise ManifestDecompressionError(f"Table of contents is not a valid zlib stream: {e}") from e

        expected = self.heap.header.toc_length_uncompressed
        if len(data) != expected:
            self.diagnostics.warn(
                TOC_LENGTH_MISMATCH,
                f"table of contents is {len(data)} bytes uncompressed, header says {expected}"
            )

        text = data.decode('utf-8', errors='replace')
        if self.strip_encoding_declaration:
            text = text.replace(ENCODING_DECLARATION, '')
        return text

    def parse(self, text: str) -> Optional[Element]:
        """Parse failures degrade to an empty document, see build()"""
        try:
            return parse_document(text)
        except PARSE_ERRORS as e:
            self.diagnostics.warn(TOC_PARSE_FAILED, f"failed to parse table of contents: {e}")
            return None

    # ── Records ────────────────────────────────────────────────────────────

    def parse_heap_ref(self, elt: Element) -> HeapRef:
        return HeapRef(
            offset=child_int(elt, 'offset', self.diagnostics),
            size=child_int(elt, 'size', self.diagnostics),
        )

    def parse_checksum(self, elt: Element) -> Checksum:
        location = self.parse_heap_ref(elt)
        return Checksum(
            location=location,
            style=attribute(elt, 'style'),
            data=self.heap.read_ref(location),
        )

    def parse_signature(self, elt: Element) -> Signature:
        certificates = []
        x509 = find_child(find_child(elt, 'KeyInfo'), 'X509Data')
        if x509 is not None:
            certificates = [element_text(cert) for cert in child_elements(x509)]

        location = self.parse_heap_ref(elt)
        return Signature(
            location=location,
            style=attribute(elt, 'style'),
            certificates=tuple(certificates),
            data=self.heap.read_ref(location),
        )

    def parse_heap_data(self, elt: Element) -> HeapData:
        encoding_elt = find_child(elt, 'encoding')
        style = encoding_elt.get('style') if encoding_elt is not None else None

        return HeapData(
            location=self.parse_heap_ref(elt),
            length=child_int(elt, 'length', self.diagnostics),
            archived_checksum=child_text(elt, 'archived-checksum'),
            extracted_checksum=child_text(elt, 'extracted-checksum'),
            encoding=Encoding.from_style(style),
            encoding_style=style,
        )

    def parse_file(self, elt: Element) -> FileNode:
        name = ''
        type_name = ''
        data = None
        children: List[FileNode] = []

        # last occurrence wins for name, type and data
        for child in child_elements(elt):
            tag = local_name(child)
            if tag == 'file':
                children.append(self.parse_file(child))
            elif tag == 'name':
                name = element_text(child)
            elif tag == 'type':
                type_name = element_text(child)
            elif tag == 'data':
                data = self.parse_heap_data(child)

        return self.make_node(name, type_name, children, data)

    def make_node(self, name: str, type_name: str, children: List[FileNode], data: Optional[HeapData]) -> FileNode:
        kind = FileKind.from_text(type_name)

        if kind is FileKind.REGULAR:
            if children:
                self._shape_problem(f"file {name!r} has {len(children)} nested entries, ignoring them")
            return RegularFile(name=name, data=data)

        if kind is FileKind.DIRECTORY:
            if data is not None:
                self._shape_problem(f"directory {name!r} carries data, ignoring it")
            return Directory(name=name, entries=tuple(children))

        return UnknownNode(name=name, type_name=type_name)

    def _shape_problem(self, message: str):
        if self.strict_tree:
            raise TreeShapeError(message)
        self.diagnostics.warn(TREE_SHAPE, message)


__all__ = ["ManifestBuilder", "TableOfContents", "ENCODING_DECLARATION"]
