from __future__ import annotations
import csv
import logging
import os
import time
from typing import Iterable, Optional, Sequence, Tuple

from .config import ScanConfig
from .errors import ManifestGenerationError
from .models import ManifestRecord, ManifestResult
from .scanner import scan_paths

logger = logging.getLogger(__name__)


def _write_file(records: Iterable[ManifestRecord], out_path: str,
                header: Optional[Sequence[str]] = None) -> Tuple[int, int]:
    """(rows written, file size). OSError is fatal and re-raised as ManifestGenerationError."""
    n = 0
    try:
        # errors="replace": stray surrogates in a field must not abort the file
        with open(out_path, "w", encoding="utf-8", errors="replace", newline="") as f:
            w = csv.writer(f, quoting=csv.QUOTE_MINIMAL)
            if header:
                w.writerow(header)
            for rec in records:
                w.writerow(rec.as_row())
                n += 1
        return n, os.path.getsize(out_path)
    except OSError as e:
        raise ManifestGenerationError(f"Failed to generate file list: {out_path}") from e


def write_manifest(records: Iterable[ManifestRecord], out_path: str,
                   header: Optional[Sequence[str]] = None) -> int:
    """Write CSV rows and return the file size in bytes.

    The manifest handed to the importer has no header; pass IMPORTER_COLUMN_NAMES
    as header to get a self-describing file instead.
    """
    return _write_file(records, out_path, header)[1]


def generate_manifest(config: ScanConfig, out_path: str,
                      header: Optional[Sequence[str]] = None) -> ManifestResult:
    t0 = time.time()
    roots = [os.path.abspath(d) for d in config.directories if d]
    count, size = _write_file(scan_paths(roots, config), out_path, header)
    elapsed = time.time() - t0
    logger.info("Manifest %s: %d records, %d bytes from %d root(s) in %.2fs",
                out_path, count, size, len(roots), elapsed)
    return ManifestResult(
        output_path=os.path.abspath(out_path),
        size_bytes=size,
        records=count,
        scanned_paths=roots,
        elapsed_sec=elapsed,
    )
