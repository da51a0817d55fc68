"""
xartool Heap Reader
Random-access reads against the archive source. Every read is a
seek followed by a read on the one shared handle, so each pair runs
under the owning archive's lock.
"""
import threading
from typing import BinaryIO, Optional
from ..errors import HeapReadError
from .models import Header, HeapRef


class HeapReader:
    def __init__(self, source: BinaryIO, header: Header, lock: Optional[threading.Lock] = None):
        self.source = source
        self.header = header
        self._lock = lock or threading.Lock()

    @property
    def heap_base(self) -> int:
        return self.header.heap_base

    def read(self, offset: int, length: int) -> bytes:
        """Read exactly length bytes at an absolute offset"""
        if offset < 0 or length < 0:
            raise HeapReadError(f"Invalid read range: offset={offset}, length={length}")

        with self._lock:
            try:
                end = self.source.seek(0, 2)
            except (OSError, ValueError) as e:
                raise HeapReadError(f"Cannot determine archive size: {e}") from e

            # manifest values are u64, reject ranges past the end before seeking or allocating
            if offset + length > end:
                raise HeapReadError(
                    f"Read of {length} bytes at offset {offset} runs past end of archive ({end} bytes)"
                )

            try:
                self.source.seek(offset)
                data = self.source.read(length)
            except (OSError, ValueError, OverflowError) as e:
                raise HeapReadError(f"Read of {length} bytes at offset {offset} failed: {e}") from e

        if data is None or len(data) != length:
            got = 0 if data is None else len(data)
            raise HeapReadError(
                f"Short read at offset {offset}: expected {length} bytes, got {got}"
            )
        return data

    def read_ref(self, ref: HeapRef, length: int = None) -> bytes:
        """
        Read a blob addressed relative to the heap base.
        length defaults to the ref's own size; file payloads pass their
        stored (compressed) length instead.
        """
        if length is None:
            length = ref.size
        return self.read(self.heap_base + ref.offset, length)

    def read_toc(self) -> bytes:
        """Raw compressed table of contents, as stored"""
        return self.read(self.header.size, self.header.toc_length_compressed)


__all__ = ["HeapReader"]
