from __future__ import annotations

import os
from pathlib import Path

import pytest

from diratlas import checksum, content
from diratlas.config import ScanConfig
from diratlas.errors import InvalidArgumentError
from diratlas.scanner import build_record, printable_name, scan_directory, scan_paths

posix_only = pytest.mark.skipif(os.name != "posix", reason="POSIX only")


def _by_name(records):
    return {r.fileName: r for r in records}


def test_depth_one_walk(sample_dir: Path):
    """Only the three top-level files appear; the subdirectory and its file do not."""
    records = list(scan_directory(str(sample_dir), ScanConfig()))
    assert sorted(r.fileName for r in records) == ["archive.zip", "birds.csv", "persons.csv.gz"]


def test_text_and_binary_fields(sample_dir: Path):
    recs = _by_name(scan_directory(str(sample_dir), ScanConfig()))

    birds = recs["birds.csv"]
    assert birds.fileExtension == "csv"
    assert birds.filePath == os.path.abspath(sample_dir / "birds.csv")
    assert birds.contentSample.startswith("name,wingspan\n")
    assert len(birds.checksum) == 64
    assert birds.fileSizeKB == 1
    assert birds.lastModifiedTime and birds.creationTime

    for name, ext in (("archive.zip", "zip"), ("persons.csv.gz", "gz")):
        rec = recs[name]
        assert rec.fileExtension == ext
        assert rec.contentSample == ""
        assert len(rec.checksum) == 64
        assert rec.fileSizeKB > 0


def test_identical_files_share_checksum(tmp_path: Path):
    (tmp_path / "one.txt").write_text("same", encoding="utf-8")
    (tmp_path / "two.txt").write_text("same", encoding="utf-8")
    recs = _by_name(scan_directory(str(tmp_path), ScanConfig()))
    assert recs["one.txt"].checksum == recs["two.txt"].checksum


def test_missing_root_yields_nothing_and_later_roots_still_scan(tmp_path: Path, sample_dir: Path):
    missing = tmp_path / "does-not-exist"
    records = list(scan_paths([str(missing), str(sample_dir)], ScanConfig()))
    assert len(records) == 3


def test_roots_processed_in_given_order(tmp_path: Path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    (first / "a.txt").write_text("a", encoding="utf-8")
    (second / "b.txt").write_text("b", encoding="utf-8")
    cfg = ScanConfig(directories=(str(second), str(first)))
    assert [r.fileName for r in scan_paths(cfg.directories, cfg)] == ["b.txt", "a.txt"]


def test_unreadable_content_still_emits_record(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    p = tmp_path / "locked.txt"
    p.write_bytes(b"x" * 1500)

    def deny(*args, **kwargs):
        raise PermissionError(13, "Permission denied", str(p))

    monkeypatch.setattr(checksum, "open", deny, raising=False)
    monkeypatch.setattr(content, "open", deny, raising=False)

    [rec] = list(scan_directory(str(tmp_path), ScanConfig()))
    assert rec.fileName == "locked.txt"
    assert rec.fileSizeKB == 2
    assert rec.checksum == ""
    assert rec.contentSample == ""


@posix_only
@pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0, reason="root ignores file modes")
def test_chmod_000_file(tmp_path: Path):
    p = tmp_path / "private.txt"
    p.write_bytes(b"x" * 1500)
    os.chmod(p, 0)
    try:
        [rec] = list(scan_directory(str(tmp_path), ScanConfig()))
    finally:
        os.chmod(p, 0o600)
    assert rec.fileSizeKB == 2
    assert rec.filePermissions == "---------"
    assert rec.checksum == ""
    assert rec.contentSample == ""


@posix_only
def test_fifo_and_directory_symlink_are_skipped(tmp_path: Path):
    (tmp_path / "real.txt").write_text("ok", encoding="utf-8")
    os.mkfifo(tmp_path / "pipe")
    target = tmp_path / "target"
    target.mkdir()
    os.symlink(target, tmp_path / "link-to-dir")
    names = [r.fileName for r in scan_directory(str(tmp_path), ScanConfig())]
    assert names == ["real.txt"]


@posix_only
def test_file_symlink_is_followed(tmp_path: Path):
    real = tmp_path / "data"
    real.mkdir()
    (real / "a.txt").write_text("hello", encoding="utf-8")
    scan_root = tmp_path / "scan"
    scan_root.mkdir()
    os.symlink(real / "a.txt", scan_root / "alias.txt")
    [rec] = list(scan_directory(str(scan_root), ScanConfig()))
    assert rec.fileName == "alias.txt"
    assert rec.contentSample == "hello"


def test_bad_algorithm_fails_before_scanning(sample_dir: Path):
    with pytest.raises(InvalidArgumentError):
        list(scan_paths([str(sample_dir)], ScanConfig(checksum_algorithm="nope")))


def test_build_record_for_extensionless_file(tmp_path: Path):
    p = tmp_path / "README"
    p.write_text("read me", encoding="utf-8")
    rec = build_record(str(p), ScanConfig())
    assert rec.fileExtension == ""
    assert rec.contentSample == "read me"


def test_printable_name_replaces_undecodable_bytes():
    assert printable_name("plain.txt") == "plain.txt"
    assert printable_name("caf\udce9.txt") == "caf\ufffd.txt"


@posix_only
def test_symlinked_file_gets_its_own_permission_probe(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    from diratlas import metadata, scanner

    foreign = tmp_path / "vfatmount"
    foreign.mkdir()
    (foreign / "a.txt").write_text("a", encoding="utf-8")
    scan_root = tmp_path / "scan"
    scan_root.mkdir()
    (scan_root / "plain.txt").write_text("p", encoding="utf-8")
    os.symlink(foreign / "a.txt", scan_root / "alias.txt")

    def fake_probe(path):
        return "vfatmount" not in os.path.realpath(path)

    monkeypatch.setattr(scanner, "supports_posix_permissions", fake_probe)
    monkeypatch.setattr(metadata, "supports_posix_permissions", fake_probe)

    recs = _by_name(scan_directory(str(scan_root), ScanConfig()))
    assert recs["plain.txt"].filePermissions != ""
    assert recs["alias.txt"].filePermissions == ""
