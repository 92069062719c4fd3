from __future__ import annotations


class DirAtlasError(Exception):
    pass


class ManifestGenerationError(DirAtlasError):
    """Manifest file could not be written. The OS error is chained as __cause__."""


class InvalidArgumentError(DirAtlasError, ValueError):
    pass


class InvalidDirectoryError(InvalidArgumentError):
    pass
