"""
xartool Unpacker
Verifies an archive, then restores its files into a directory.
Each file is written to a temp file first and moved into place.
"""
import os
import time
import shutil
import tempfile
from pathlib import Path
from typing import Dict, List
from ..archive.archive import Archive
from ..archive.encoding import decode_payload
from ..archive.models import Directory, FileNode, RegularFile
from ..config import config
from ..errors import IntegrityError, PayloadDecodeError, UnsafePathError
from ..utils.logger import logger
from ..verifier.verifier import Verifier


class Unpacker:
    def __init__(self, strict: bool = None):
        self.strict = strict
        self.verifier = Verifier()

    def unpack(self, archive_path: str, output_dir: str, force: bool = False, overwrite: bool = None) -> dict:
        """
        Restore every regular file of an archive under output_dir.

        Refuses to write anything when verification fails, unless force is
        set; forced runs skip entries whose payload cannot be decoded.
        """
        start_time = time.time()
        if overwrite is None:
            overwrite = config.overwrite

        logger.info(f"🔓 Unpacking: {archive_path}")
        with Archive.open(archive_path, strict=self.strict) as archive:
            report = self.verifier.verify(archive)
            if not report.success:
                if not force:
                    raise IntegrityError(f"Archive verification failed: {report.message}")
                logger.warning("Verification failed, unpacking anyway (--force)")

            # every name is checked before the first byte is written
            self.check_names(archive.files)

            out_dir = Path(output_dir)
            out_dir.mkdir(parents=True, exist_ok=True)

            written: List[str] = []
            skipped: List[Dict] = []
            for node in archive.files:
                self._restore(archive, node, out_dir, overwrite, written, skipped)

        logger.info(f"✅ Restored {len(written)} files to {out_dir}")

        return {
            'success': report.success and not skipped,
            'output_dir': str(out_dir),
            'files': written,
            'skipped': skipped,
            'verification': report.to_dict(),
            'time': time.time() - start_time
        }

    def _restore(self, archive: Archive, node: FileNode, parent: Path, overwrite: bool, written: list, skipped: list):
        if not isinstance(node, (Directory, RegularFile)):
            logger.debug(f"Skipping {node.name!r}, not a regular file or directory")
            return

        target = parent / self.safe_name(node.name)

        if isinstance(node, Directory):
            target.mkdir(parents=True, exist_ok=True)
            for child in node.children:
                self._restore(archive, child, target, overwrite, written, skipped)
            return

        if target.exists() and not overwrite:
            raise FileExistsError(f"Refusing to overwrite existing file: {target}")

        content = b''
        if node.data is not None:
            raw = archive.heap.read_ref(node.data.location, node.data.length)
            try:
                content = decode_payload(node.data, raw)
            except PayloadDecodeError as e:
                logger.warning(f"Skipping {target}: {e}")
                skipped.append({'file': str(target), 'error': str(e)})
                return

        self._write(target, content)
        written.append(str(target))
        logger.debug(f"   Restored: {target}")

    def _write(self, target: Path, content: bytes):
        tmp_fd, tmp_path = tempfile.mkstemp(dir=target.parent, suffix='.tmp')
        try:
            with os.fdopen(tmp_fd, 'wb') as out_f:
                out_f.write(content)
            shutil.move(tmp_path, target)
            tmp_path = None
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)

    def check_names(self, nodes):
        for node in nodes:
            if isinstance(node, (Directory, RegularFile)):
                self.safe_name(node.name)
                self.check_names(node.children)

    @staticmethod
    def safe_name(name: str) -> str:
        """Entry names are single path components, anything else could escape output_dir"""
        if not name or name in {'.', '..'} or '/' in name or '\\' in name or '\0' in name:
            raise UnsafePathError(f"Unsafe entry name in archive: {name!r}")
        return name


__all__ = ["Unpacker"]
