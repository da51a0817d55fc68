"""
xartool Verifier
Recomputes the table of contents digest and every file's archived and
extracted digests, and compares them with what the archive records.
"""
import time
from dataclasses import dataclass, field
from typing import List

from ..archive.archive import Archive
from ..archive.encoding import decode_payload
from ..archive.models import Directory, FileNode, RegularFile
from ..errors import PayloadDecodeError, UnsupportedEncodingError
from ..utils.checksum import calculate_bytes_checksum, digests_match
from ..utils.logger import logger

SIGNATURE_ABSENT = 'absent'
SIGNATURE_UNVERIFIED = 'present-unverified'


@dataclass
class VerificationReport:
    success: bool
    errors: List[str] = field(default_factory=list)
    signature_status: str = SIGNATURE_ABSENT
    checked_files: int = 0
    processing_time: float = 0.0

    @property
    def message(self) -> str:
        return ", ".join(self.errors)

    def to_dict(self) -> dict:
        return {
            'success': self.success,
            'errors': list(self.errors),
            'message': self.message,
            'signature_status': self.signature_status,
            'checked_files': self.checked_files,
            'processing_time': self.processing_time,
        }


class Verifier:
    def verify(self, archive: Archive) -> VerificationReport:
        """
        Verify one archive. Read-only against the parsed model, so calling
        it again just repeats the same reads and comparisons.

        A table of contents checksum mismatch fails straight away without
        looking at any file. Per-file mismatches are all collected.
        """
        start_time = time.time()
        signature_status = SIGNATURE_UNVERIFIED if archive.signature else SIGNATURE_ABSENT

        toc_error = self.verify_toc(archive)
        if toc_error:
            logger.error(toc_error)
            return VerificationReport(
                success=False,
                errors=[toc_error],
                signature_status=signature_status,
                processing_time=time.time() - start_time,
            )

        errors: List[str] = []
        checked = 0
        for node in archive.files:
            checked += self.verify_tree(archive, node, errors)

        if archive.signature:
            logger.warning(
                f"Archive carries a {archive.signature.style or 'unknown'} signature, "
                f"signature verification is not supported"
            )

        report = VerificationReport(
            success=not errors,
            errors=errors,
            signature_status=signature_status,
            checked_files=checked,
            processing_time=time.time() - start_time,
        )
        if report.success:
            logger.info(f"✅ Integrity verified ({checked} files)")
        else:
            logger.error(f"{len(errors)} integrity problem(s) found")
        return report

    def verify_toc(self, archive: Archive) -> str:
        """Returns an error message, or an empty string when the digest matches"""
        checksum = archive.checksum
        if checksum is None:
            logger.warning("No checksum in table of contents, skipping manifest check")
            return ''

        toc_digest = calculate_bytes_checksum(archive.heap.read_toc())
        expected = checksum.hexdigest
        if toc_digest != expected:
            return f"Checksum mismatch. Expected {expected}, actual {toc_digest}"
        return ''

    def verify_tree(self, archive: Archive, node: FileNode, errors: List[str]) -> int:
        """Depth-first walk appending mismatch messages; returns files checked"""
        if isinstance(node, Directory):
            checked = 0
            for child in node.children:
                checked += self.verify_tree(archive, child, errors)
            return checked

        if isinstance(node, RegularFile) and node.data is not None:
            errors.extend(self.verify_file(archive, node))
            return 1

        return 0

    def verify_file(self, archive: Archive, node: RegularFile) -> List[str]:
        data = node.data
        errors = []
        raw = archive.heap.read_ref(data.location, data.length)

        archived_digest = calculate_bytes_checksum(raw)
        if not digests_match(data.archived_checksum, archived_digest):
            errors.append(
                f"Digest mismatch for {node.name}. "
                f"Expected {data.archived_checksum}, actual {archived_digest}"
            )

        try:
            extracted = decode_payload(data, raw)
        except UnsupportedEncodingError as e:
            errors.append(f"{e} for {node.name}")
        except PayloadDecodeError as e:
            errors.append(f"Extracted data for {node.name} could not be decoded: {e}")
        else:
            extracted_digest = calculate_bytes_checksum(extracted)
            if not digests_match(data.extracted_checksum, extracted_digest):
                errors.append(
                    f"Extracted digest mismatch for {node.name}. "
                    f"Expected {data.extracted_checksum}, actual {extracted_digest}"
                )

        for message in errors:
            logger.debug(message)
        return errors


__all__ = ["Verifier", "VerificationReport", "SIGNATURE_ABSENT", "SIGNATURE_UNVERIFIED"]
