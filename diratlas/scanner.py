from __future__ import annotations
import logging
import os
import stat as statmod
from typing import Iterable, Iterator, List, Optional

from .checksum import compute_checksum, hash_algorithm
from .config import ScanConfig
from .content import sample_content
from .metadata import extract_metadata, supports_posix_permissions
from .models import ManifestRecord
from .utils import file_extension

logger = logging.getLogger(__name__)


def printable_name(s: str) -> str:
    """Undecodable bytes in OS names (surrogate escapes) become U+FFFD."""
    return os.fsencode(s).decode("utf-8", "replace")


def build_record(path: str, config: ScanConfig,
                 st: Optional[os.stat_result] = None,
                 posix_permissions: Optional[bool] = None) -> ManifestRecord:
    """One manifest row for a regular file. Fields that cannot be read come out empty/zero."""
    path = os.path.abspath(path)
    name = os.path.basename(path)
    meta = extract_metadata(path, tz=config.timezone, st=st, posix_permissions=posix_permissions)
    checksum = compute_checksum(path, config.checksum_algorithm, config.chunk_size)
    sample = sample_content(path, config.sample_limit, config.non_printable_threshold)
    shown = printable_name(name)
    return ManifestRecord(
        fileName=shown,
        fileSizeKB=meta.size_kb or 0,
        fileExtension=file_extension(shown),
        lastModifiedTime=meta.modified or "",
        creationTime=meta.created or "",
        author=printable_name(meta.owner or ""),
        filePath=printable_name(path),
        filePermissions=meta.permissions or "",
        checksum=checksum or "",
        contentSample=sample or "",
    )


def scan_directory(root: str, config: ScanConfig) -> Iterator[ManifestRecord]:
    """Records for the immediate regular files of root. Subdirectories are not entered.

    An unreadable root yields nothing. Entries that vanish or cannot be stat'ed
    are logged and skipped.
    """
    root = os.path.abspath(root)
    try:
        it = os.scandir(root)
    except OSError as e:
        logger.info("Error reading directory %s: %s", root, e)
        return

    with it:
        posix = supports_posix_permissions(root)
        while True:
            try:
                entry = next(it)
            except StopIteration:
                break
            except OSError as e:
                logger.info("Error reading directory %s: %s", root, e)
                break

            try:
                if entry.is_dir(follow_symlinks=False):
                    continue
                st = entry.stat(follow_symlinks=True)
            except OSError as e:
                logger.info("Skipping %s: %s", entry.path, e)
                continue

            if not statmod.S_ISREG(st.st_mode):
                # symlinked dirs, fifos, sockets, devices
                logger.debug("Skipping non-regular entry %s", entry.path)
                continue

            try:
                linked = entry.is_symlink()
            except OSError:
                linked = True
            # a symlinked file may live on another filesystem
            yield build_record(entry.path, config, st=st,
                               posix_permissions=None if linked else posix)


def _scan_all(paths: List[str], config: ScanConfig) -> Iterator[ManifestRecord]:
    for p in paths:
        if not p:
            continue
        yield from scan_directory(p, config)


def scan_paths(paths: Iterable[str], config: ScanConfig) -> Iterator[ManifestRecord]:
    """Manifest over several roots, in the order given.

    A bad checksum algorithm name raises here, before anything is read or written.
    """
    hash_algorithm(config.checksum_algorithm)
    return _scan_all(list(paths), config)
