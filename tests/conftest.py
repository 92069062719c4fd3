from __future__ import annotations

import gzip
import io
import zipfile
from pathlib import Path

import pytest

# Ascending byte pattern: ~12% control characters once decoded, well over the 5% limit.
BINARY_BYTES = bytes(range(256)) * 16


def _make_zip(path: Path) -> None:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_STORED) as z:
        z.writestr("inner.bin", BINARY_BYTES)
    path.write_bytes(buf.getvalue())


@pytest.fixture
def sample_dir(tmp_path: Path) -> Path:
    """Three files at the top level plus a subdirectory holding one more file."""
    root = tmp_path / "inbox"
    root.mkdir()
    (root / "birds.csv").write_text("name,wingspan\nalbatross,3.5\nwren,0.15\n", encoding="utf-8")
    _make_zip(root / "archive.zip")
    (root / "persons.csv.gz").write_bytes(gzip.compress(BINARY_BYTES, compresslevel=0))
    sub = root / "nested"
    sub.mkdir()
    (sub / "deep.txt").write_text("not listed", encoding="utf-8")
    return root


@pytest.fixture
def binary_bytes() -> bytes:
    return BINARY_BYTES
