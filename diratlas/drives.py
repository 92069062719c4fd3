from __future__ import annotations
import logging
import os
from typing import Iterable, List, Optional, Sequence

import psutil

logger = logging.getLogger(__name__)

# Top-level directories never offered as scan roots. Matched case-insensitively.
DEFAULT_RESTRICTED_DIRECTORIES = (
    "System32",
    "Program Files",
    "Program Files (x86)",
    "Windows",
    "usr",
    "etc",
    "var",
    "bin",
    "sbin",
    "lib",
    "opt",
    "tmp",
    "Volumes",
)


def list_filesystem_roots() -> List[str]:
    """Drive roots on Windows (C:\\, D:\\, ...); the single root "/" elsewhere."""
    if os.name != "nt":
        return [os.sep]
    roots = []
    for p in psutil.disk_partitions(all=False):
        mp = p.mountpoint
        if mp and mp not in roots:
            roots.append(mp)
    roots.sort(key=str.lower)
    return roots


def list_root_directories(restricted: Sequence[str] = DEFAULT_RESTRICTED_DIRECTORIES,
                          roots: Optional[Iterable[str]] = None) -> List[str]:
    """Usable top-level directories under each filesystem root.

    A root whose children cannot be listed is returned itself.
    """
    if roots is None:
        roots = list_filesystem_roots()
    deny = {r.lower() for r in restricted}

    out: List[str] = []
    for root in roots:
        try:
            with os.scandir(root) as it:
                entries = list(it)
        except OSError as e:
            logger.info("Cannot list root %s: %s", root, e)
            out.append(str(root))
            continue
        for entry in entries:
            try:
                if not entry.is_dir():
                    continue
            except OSError as e:
                logger.debug("Skipping %s: %s", entry.path, e)
                continue
            if entry.name.lower() in deny:
                continue
            out.append(entry.path)
    return out
