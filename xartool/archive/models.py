"""
xartool Archive Entities
Typed records built once while opening an archive. All of them are
immutable; verification only reads them.
"""
import enum
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class Header:
    magic: int
    size: int
    version: int
    toc_length_compressed: int
    toc_length_uncompressed: int
    checksum_algorithm: int

    @property
    def heap_base(self) -> int:
        """Absolute offset of the heap, every manifest offset is relative to it"""
        return self.size + self.toc_length_compressed


@dataclass(frozen=True)
class HeapRef:
    offset: int = 0
    # size of the blob after decompression, if any
    size: int = 0


class Encoding(enum.Enum):
    GZIP = 'application/x-gzip'
    OTHER = 'other'

    @classmethod
    def from_style(cls, style: Optional[str]) -> 'Encoding':
        if style == cls.GZIP.value:
            return cls.GZIP
        return cls.OTHER


@dataclass(frozen=True)
class HeapData:
    location: HeapRef
    # byte count of the stored (possibly compressed) payload
    length: int = 0
    archived_checksum: str = ''
    extracted_checksum: str = ''
    encoding: Encoding = Encoding.OTHER
    encoding_style: Optional[str] = None


@dataclass(frozen=True)
class Checksum:
    location: HeapRef
    style: str = ''
    data: bytes = b''

    @property
    def hexdigest(self) -> str:
        return self.data.hex()


@dataclass(frozen=True)
class Signature:
    location: HeapRef
    style: str = ''
    certificates: Tuple[str, ...] = ()
    data: bytes = b''


class FileKind(enum.Enum):
    REGULAR = 'file'
    DIRECTORY = 'directory'
    UNKNOWN = 'unknown'

    @classmethod
    def from_text(cls, text: str) -> 'FileKind':
        if text == cls.REGULAR.value:
            return cls.REGULAR
        if text == cls.DIRECTORY.value:
            return cls.DIRECTORY
        return cls.UNKNOWN


@dataclass(frozen=True)
class FileNode:
    name: str = ''

    kind = FileKind.UNKNOWN

    @property
    def children(self) -> Tuple['FileNode', ...]:
        return ()

    def walk(self, parent: str = '') -> Iterator[Tuple[str, 'FileNode']]:
        """Depth-first, document order, yields (path, node) pairs"""
        path = f"{parent}/{self.name}" if parent else self.name
        yield path, self
        for child in self.children:
            yield from child.walk(path)


@dataclass(frozen=True)
class RegularFile(FileNode):
    data: Optional[HeapData] = None

    kind = FileKind.REGULAR


@dataclass(frozen=True)
class Directory(FileNode):
    entries: Tuple[FileNode, ...] = field(default_factory=tuple)

    kind = FileKind.DIRECTORY

    @property
    def children(self) -> Tuple[FileNode, ...]:
        return self.entries


@dataclass(frozen=True)
class UnknownNode(FileNode):
    # raw text of the <type> element, empty if there was none
    type_name: str = ''


def iter_files(nodes: List[FileNode]) -> Iterator[Tuple[str, FileNode]]:
    for node in nodes:
        yield from node.walk()


__all__ = [
    "Header",
    "HeapRef",
    "Encoding",
    "HeapData",
    "Checksum",
    "Signature",
    "FileKind",
    "FileNode",
    "RegularFile",
    "Directory",
    "UnknownNode",
    "iter_files",
]
