from __future__ import annotations
import logging
import os
import stat as statmod
from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional, Tuple

import psutil

from .utils import size_in_kb, format_timestamp

if os.name == "posix":
    import pwd
else:
    pwd = None

logger = logging.getLogger(__name__)

# Filesystems that carry no POSIX mode bits even when mounted on a POSIX host.
NON_POSIX_FSTYPES = {
    "vfat", "msdos", "fat", "fat32", "exfat", "ntfs", "ntfs3", "fuseblk",
    "cifs", "smbfs", "smb3",
}


@dataclass(frozen=True)
class FileMetadata:
    size_bytes: Optional[int] = None
    modified: Optional[str] = None
    created: Optional[str] = None
    owner: Optional[str] = None
    permissions: Optional[str] = None

    @property
    def size_kb(self) -> Optional[int]:
        if self.size_bytes is None:
            return None
        return size_in_kb(self.size_bytes)


def _containing_partition(path: str) -> Optional[Tuple[str, str]]:
    """(mountpoint, fstype) of the longest mountpoint that contains path."""
    real = os.path.realpath(path)
    best: Optional[Tuple[str, str]] = None
    for p in psutil.disk_partitions(all=True):
        mp = p.mountpoint
        if not mp:
            continue
        prefix = mp if mp.endswith(os.sep) else mp + os.sep
        if real == mp or real.startswith(prefix):
            if best is None or len(mp) > len(best[0]):
                best = (mp, p.fstype)
    return best


def supports_posix_permissions(path: str) -> bool:
    if os.name != "posix":
        return False
    try:
        part = _containing_partition(path)
    except (OSError, RuntimeError) as e:
        # /proc/mounts unreadable; assume the host's native filesystem
        logger.debug("Partition lookup failed for %s: %s", path, e)
        return True
    if part is None:
        return True
    return part[1].lower() not in NON_POSIX_FSTYPES


def permission_string(mode: int) -> str:
    # "-rwxr-xr-x" -> "rwxr-xr-x"
    return statmod.filemode(mode)[1:]


def _creation_time(st: os.stat_result) -> float:
    birth = getattr(st, "st_birthtime", None)
    if birth:
        return birth
    if os.name == "nt":
        return st.st_ctime
    # no birth time on this platform; fall back to the modification time
    return st.st_mtime


def _owner_name(st: os.stat_result) -> Optional[str]:
    if pwd is None:
        return None
    try:
        return pwd.getpwuid(st.st_uid).pw_name
    except KeyError:
        return None


def _timestamp(ts: float, tz: Optional[tzinfo]) -> Optional[str]:
    try:
        return format_timestamp(ts, tz)
    except (OverflowError, OSError, ValueError):
        return None


def extract_metadata(path: str, tz: Optional[tzinfo] = None,
                     st: Optional[os.stat_result] = None,
                     posix_permissions: Optional[bool] = None) -> FileMetadata:
    """Best-effort metadata; each field is None when it cannot be read.

    posix_permissions skips the filesystem probe when the caller already knows
    whether the containing filesystem has POSIX mode bits.
    """
    if st is None:
        try:
            st = os.stat(path)
        except OSError as e:
            logger.info("Cannot stat %s: %s", path, e)
            return FileMetadata()

    if posix_permissions is None:
        posix_permissions = supports_posix_permissions(path)
    permissions = None
    if posix_permissions:
        permissions = permission_string(st.st_mode)
    else:
        logger.debug("POSIX file attributes are not supported for %s", path)

    return FileMetadata(
        size_bytes=int(st.st_size),
        modified=_timestamp(st.st_mtime, tz),
        created=_timestamp(_creation_time(st), tz),
        owner=_owner_name(st),
        permissions=permissions,
    )
