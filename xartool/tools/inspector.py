"""
xartool Archive Inspector
Peek inside a XAR archive without reading any file payload.
"""
from pathlib import Path
from ..archive.archive import Archive
from ..archive.header import XAR_MAGIC
from ..archive.models import RegularFile, UnknownNode


class Inspector:
    def inspect(self, archive_path: str, show: bool = True) -> dict:
        """
        Read header and table of contents, return them as a dict.
        """
        path = Path(archive_path)
        if not path.exists():
            raise ValueError(f"Archive not found: {archive_path}")

        with Archive.open(path) as archive:
            header = archive.header
            entries = []
            for entry_path, node in archive.iter_files():
                entry = {'path': entry_path, 'kind': node.kind.value}
                if isinstance(node, RegularFile) and node.data is not None:
                    entry['length'] = node.data.length
                    entry['size'] = node.data.location.size
                    entry['encoding'] = node.data.encoding_style
                elif isinstance(node, UnknownNode):
                    entry['type'] = node.type_name
                entries.append(entry)

            info = {
                'archive_path': str(path),
                'archive_size': path.stat().st_size,
                'magic_ok': header.magic == XAR_MAGIC,
                'header_size': header.size,
                'version': header.version,
                'toc_length_compressed': header.toc_length_compressed,
                'toc_length_uncompressed': header.toc_length_uncompressed,
                'checksum_algorithm': header.checksum_algorithm,
                'heap_base': header.heap_base,
                'checksum': archive.checksum.hexdigest if archive.checksum else None,
                'checksum_style': archive.checksum.style if archive.checksum else None,
                'signature_style': archive.signature.style if archive.signature else None,
                'certificates': len(archive.signature.certificates) if archive.signature else 0,
                'file_count': sum(1 for e in entries if e['kind'] == 'file'),
                'entries': entries,
                'diagnostics': [d.to_dict() for d in archive.diagnostics],
            }

        if show:
            self._print(info)
        return info

    def _print(self, info: dict):
        def fmt_size(b):
            if b is None:
                return 'unknown'
            if b >= 1024 * 1024:
                return f"{b/1024/1024:.2f} MB"
            return f"{b/1024:.1f} KB"

        print(f"\n{'='*50}")
        print(f"  XAR Archive Inspection")
        print(f"{'='*50}")
        print(f"  File:        {info['archive_path']}")
        print(f"  Size:        {fmt_size(info['archive_size'])}")
        print(f"  Magic:       {'ok' if info['magic_ok'] else 'BAD'}")
        print(f"  Version:     {info['version']}")
        print(f"  TOC:         {info['toc_length_compressed']} bytes "
              f"({info['toc_length_uncompressed']} uncompressed)")
        print(f"  Heap base:   {info['heap_base']}")
        print()
        print(f"  Checksum:    {info['checksum'] or 'none'}"
              + (f" ({info['checksum_style']})" if info['checksum_style'] else ''))
        if info['signature_style'] is not None:
            print(f"  Signature:   {info['signature_style'] or 'unknown'}, "
                  f"{info['certificates']} certificate(s), not verified")
        else:
            print(f"  Signature:   none")
        print(f"  Files:       {info['file_count']}")
        print()
        for entry in info['entries']:
            if entry['kind'] == 'directory':
                print(f"  {entry['path']}/")
            elif 'length' in entry:
                print(f"  {entry['path']}  {entry['length']} -> {entry['size']} bytes"
                      f"  [{entry['encoding'] or 'stored'}]")
            else:
                print(f"  {entry['path']}")
        if info['diagnostics']:
            print()
            for diagnostic in info['diagnostics']:
                print(f"  ! {diagnostic['message']}")
        print(f"{'='*50}\n")


__all__ = ["Inspector"]
