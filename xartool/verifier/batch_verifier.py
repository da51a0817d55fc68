"""
xartool Batch Verifier
Verifies many archives concurrently. Each worker opens its own
Archive, so no source handle is ever shared between threads.
"""
import os
import time
from pathlib import Path
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Dict, Optional, Callable, Iterable
from ..archive.archive import Archive
from ..config import config
from ..errors import XarError
from ..utils.logger import logger
from .verifier import Verifier


class BatchVerifier:
    def __init__(self, max_workers: int = None, strict: bool = None):
        self.max_workers = max_workers or config.max_workers or min(32, (os.cpu_count() or 4) * 2)
        self.strict = strict
        self.verifier = Verifier()

    def verify_directory(
        self,
        input_dir: str,
        recursive: bool = False,
        patterns: Optional[Iterable[str]] = None,
        on_progress: Optional[Callable] = None
    ) -> Dict:
        """
        Verify every archive in a directory.

        Args:
            input_dir: directory containing archives
            recursive: if True, walks subdirectories
            patterns: glob patterns to match, defaults to the configured ones
            on_progress: optional callback(completed, total, result)

        Returns:
            summary dict with results, stats, and failures
        """
        input_path = Path(input_dir)
        if not input_path.is_dir():
            raise ValueError(f"Input directory not found: {input_dir}")

        patterns = list(patterns or config.batch_patterns)
        found = set()
        for pattern in patterns:
            matches = input_path.rglob(pattern) if recursive else input_path.glob(pattern)
            found.update(p for p in matches if p.is_file())
        files = sorted(found)

        if not files:
            logger.warning(f"No archives matching {', '.join(patterns)} found in {input_dir}")
            return self._empty_summary()

        logger.info(f"Batch verifying {len(files)} archives with {self.max_workers} workers...")
        return self._run(files, on_progress)

    def verify_files(self, file_paths: List[str], on_progress: Optional[Callable] = None) -> Dict:
        files = [Path(f) for f in file_paths]
        logger.info(f"Batch verifying {len(files)} archives with {self.max_workers} workers...")
        return self._run(files, on_progress)

    def _run(self, files: List[Path], on_progress: Optional[Callable]) -> Dict:
        start_time = time.time()
        results = []
        failures = []
        total = len(files)
        completed = 0

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_path = {
                executor.submit(self._verify_one, path): path
                for path in files
            }

            for future in as_completed(future_to_path):
                path = future_to_path[future]
                completed += 1

                try:
                    result = future.result()
                except (XarError, OSError) as e:
                    result = {'file': str(path), 'success': False, 'error': str(e)}

                if result['success']:
                    results.append(result)
                    logger.info(f"   [{completed}/{total}] {path.name} verified")
                else:
                    failures.append(result)
                    logger.error(f"   [{completed}/{total}] {path.name}: {result['error']}")

                if on_progress:
                    on_progress(completed, total, result)

        elapsed = time.time() - start_time
        return self._build_summary(results, failures, elapsed)

    def _verify_one(self, path: Path) -> Dict:
        """Open and verify a single archive, called from thread pool"""
        with Archive.open(path, strict=self.strict) as archive:
            report = self.verifier.verify(archive)
            diagnostics = [d.to_dict() for d in archive.diagnostics]

        result = report.to_dict()
        result['file'] = str(path)
        result['error'] = report.message
        result['diagnostics'] = diagnostics
        return result

    def _build_summary(self, results: List[Dict], failures: List[Dict], elapsed: float) -> Dict:
        total = len(results) + len(failures)

        logger.info(f"{'='*50}")
        logger.info(f"Batch Verification Complete!")
        logger.info(f"   Archives:  {len(results)} verified, {len(failures)} failed")
        logger.info(f"   Time:      {elapsed:.2f}s")
        logger.info(f"{'='*50}")

        return {
            'success': len(failures) == 0,
            'total': total,
            'succeeded': len(results),
            'failed': len(failures),
            'failures': failures,
            'results': results,
            'processing_time': elapsed
        }

    def _empty_summary(self) -> Dict:
        return {
            'success': True,
            'total': 0,
            'succeeded': 0,
            'failed': 0,
            'failures': [],
            'results': [],
            'processing_time': 0
        }


__all__ = ["BatchVerifier"]
