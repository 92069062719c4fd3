from __future__ import annotations
import logging
import os
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Optional, List

from cryptography.hazmat.primitives import hashes

from .errors import InvalidArgumentError

if os.name == "posix":
    import fcntl
else:
    fcntl = None

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "sha256"
DEFAULT_CHUNK = 8192

_ALGORITHMS: Dict[str, Callable[[], hashes.HashAlgorithm]] = {
    "md5": hashes.MD5,
    "sha1": hashes.SHA1,
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
    "sha3224": hashes.SHA3_224,
    "sha3256": hashes.SHA3_256,
    "sha3384": hashes.SHA3_384,
    "sha3512": hashes.SHA3_512,
    "blake2b": lambda: hashes.BLAKE2b(64),
    "blake2s": lambda: hashes.BLAKE2s(32),
}


def _normalize(name: str) -> str:
    # "SHA-256", "sha_256", "sha256" -> "sha256"
    return name.lower().replace("-", "").replace("_", "")


def supported_algorithms() -> List[str]:
    return sorted(_ALGORITHMS)


def hash_algorithm(name: str) -> hashes.HashAlgorithm:
    """Resolve an algorithm identifier. Unknown names are a caller error, not a file error."""
    factory = _ALGORITHMS.get(_normalize(name or ""))
    if factory is None:
        raise InvalidArgumentError(
            f"Unsupported checksum algorithm: {name!r} (supported: {', '.join(supported_algorithms())})")
    return factory()


@contextmanager
def shared_lock(f) -> Iterator[bool]:
    """Shared (read) lock over the whole file; yields whether the lock is held."""
    if fcntl is None:
        # msvcrt only has exclusive locks
        yield False
        return
    try:
        fcntl.lockf(f.fileno(), fcntl.LOCK_SH)
    except OSError as e:
        logger.debug("Shared lock unavailable for %s: %s", getattr(f, "name", f), e)
        yield False
        return
    try:
        yield True
    finally:
        fcntl.lockf(f.fileno(), fcntl.LOCK_UN)


def compute_checksum(path: str,
                     algorithm: str = DEFAULT_ALGORITHM,
                     chunk_size: int = DEFAULT_CHUNK) -> Optional[str]:
    """Lowercase hex digest of the file, or None when the file is gone or unreadable."""
    algo = hash_algorithm(algorithm)
    if not os.path.exists(path):
        return None
    try:
        with open(path, "rb") as f, shared_lock(f):
            digest = hashes.Hash(algo)
            while True:
                chunk = f.read(chunk_size)
                if not chunk:
                    break
                digest.update(chunk)
            return digest.finalize().hex()
    except OSError as e:
        logger.info("Checksum failed for %s: %s", path, e)
        return None
