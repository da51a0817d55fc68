"""Shared test fixtures for xartool: builds XAR archives in memory."""

from __future__ import annotations

import hashlib
import io
import struct
import zlib
from pathlib import Path
from typing import Any, Callable
from xml.sax.saxutils import escape

import pytest

GZIP = "application/x-gzip"
STORED = "application/octet-stream"


def sha1_hex(data: bytes) -> str:
    return hashlib.sha1(data).hexdigest()


class BuiltArchive:
    """Raw archive bytes plus where every payload landed, for corruption tests."""

    def __init__(self, data: bytes, heap_base: int, payloads: dict[str, tuple[int, int]],
                 checksum_offset: int | None):
        self.data = bytearray(data)
        self.heap_base = heap_base
        self.payloads = payloads
        self.checksum_offset = checksum_offset

    def corrupt(self, absolute_offset: int) -> "BuiltArchive":
        self.data[absolute_offset] ^= 0xFF
        return self

    def corrupt_payload(self, name: str, index: int = 0) -> "BuiltArchive":
        offset, length = self.payloads[name]
        return self.corrupt(offset + (index % length))

    def corrupt_checksum(self) -> "BuiltArchive":
        assert self.checksum_offset is not None
        return self.corrupt(self.checksum_offset)

    def stream(self) -> io.BytesIO:
        return io.BytesIO(bytes(self.data))

    def write(self, path: Path) -> Path:
        path.write_bytes(bytes(self.data))
        return path


def file_entry(name: str, content: bytes = b"", encoding: str | None = GZIP, **overrides: Any) -> dict:
    entry = {"name": name, "type": "file", "content": content, "encoding": encoding}
    entry.update(overrides)
    return entry


def dir_entry(name: str, *children: dict, **overrides: Any) -> dict:
    entry = {"name": name, "type": "directory", "children": list(children)}
    entry.update(overrides)
    return entry


def build_xar(
    entries: list[dict],
    checksum: bool = True,
    signature: bytes | None = None,
    certificates: tuple[str, ...] = (),
    extra_toc: str = "",
    magic: int = 0x78617221,
    version: int = 1,
    checksum_algorithm: int = 1,
    header_size: int = 28,
    declaration: str = '<?xml version="1.0" encoding="UTF-8"?>',
    toc_override: str | None = None,
) -> BuiltArchive:
    heap = bytearray()
    # relative offsets for now, made absolute once the TOC size is known
    payloads: dict[str, tuple[int, int]] = {}
    toc_parts = []

    if checksum:
        heap += b"\0" * 20
        toc_parts.append(
            '<checksum style="sha1"><offset>0</offset><size>20</size></checksum>'
        )

    if signature is not None:
        offset = len(heap)
        heap += signature
        certs = "".join(f"<X509Certificate>{escape(c)}</X509Certificate>" for c in certificates)
        toc_parts.append(
            f'<signature style="RSA"><offset>{offset}</offset><size>{len(signature)}</size>'
            f'<KeyInfo xmlns="http://www.w3.org/2000/09/xmldsig#"><X509Data>{certs}</X509Data></KeyInfo>'
            f"</signature>"
        )

    def render(entry: dict, counter: list) -> str:
        counter[0] += 1
        parts = [f'<file id="{counter[0]}">']
        if entry.get("type") == "directory" and "data" not in entry:
            parts.append(f"<name>{escape(entry['name'])}</name><type>directory</type>")
            for child in entry.get("children", []):
                parts.append(render(child, counter))
        elif "raw_xml" in entry:
            parts.append(entry["raw_xml"])
        else:
            content = entry.get("content", b"")
            encoding = entry.get("encoding")
            stored = zlib.compress(content) if encoding == GZIP else content
            offset = len(heap)
            heap.extend(stored)
            payloads[entry["name"]] = (offset, len(stored))
            encoding_xml = f'<encoding style="{encoding}"/>' if encoding else ""
            parts.append(
                f"<data>"
                f"<length>{entry.get('length', len(stored))}</length>"
                f"<offset>{offset}</offset>"
                f"<size>{len(content)}</size>"
                f"{encoding_xml}"
                f'<archived-checksum style="sha1">{entry.get("archived", sha1_hex(stored))}</archived-checksum>'
                f'<extracted-checksum style="sha1">{entry.get("extracted", sha1_hex(content))}</extracted-checksum>'
                f"</data>"
            )
            parts.append(f"<name>{escape(entry['name'])}</name><type>{entry.get('type', 'file')}</type>")
            for child in entry.get("children", []):
                parts.append(render(child, counter))
        parts.append("</file>")
        return "".join(parts)

    counter = [0]
    for entry in entries:
        toc_parts.append(render(entry, counter))
    toc_parts.append(extra_toc)

    if toc_override is not None:
        xml = toc_override
    else:
        xml = f'{declaration}\n<xar><toc><creation-time>2015-01-01T00:00:00</creation-time>{"".join(toc_parts)}</toc></xar>'
    xml_bytes = xml.encode("utf-8")
    toc = zlib.compress(xml_bytes)

    heap_base = header_size + len(toc)
    checksum_offset = None
    if checksum:
        heap[0:20] = hashlib.sha1(toc).digest()
        checksum_offset = heap_base

    header = struct.pack(">IHHQQI", magic, header_size, version, len(toc), len(xml_bytes), checksum_algorithm)
    header = header.ljust(header_size, b"\0")
    absolute = {name: (heap_base + off, length) for name, (off, length) in payloads.items()}
    return BuiltArchive(header + toc + bytes(heap), heap_base, absolute, checksum_offset)


@pytest.fixture
def make_xar() -> Callable[..., BuiltArchive]:
    """Factory building an archive from file_entry()/dir_entry() dicts."""
    return build_xar


@pytest.fixture
def entry() -> Callable[..., dict]:
    return file_entry


@pytest.fixture
def directory() -> Callable[..., dict]:
    return dir_entry


@pytest.fixture
def sample_xar() -> BuiltArchive:
    """A small valid archive: a gzip file, a stored file, and a nested directory."""
    return build_xar([
        file_entry("readme.txt", b"hello xar\n" * 20),
        file_entry("raw.bin", b"\x00\x01\x02\x03", encoding=STORED),
        dir_entry(
            "docs",
            file_entry("a.txt", b"alpha"),
            dir_entry("deep", file_entry("b.txt", b"beta" * 100)),
        ),
    ])


@pytest.fixture
def sample_path(tmp_path: Path, sample_xar: BuiltArchive) -> Path:
    return sample_xar.write(tmp_path / "sample.xar")
