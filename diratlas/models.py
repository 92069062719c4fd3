from __future__ import annotations
from dataclasses import dataclass, field, astuple
from typing import List, Dict, Any

# Column order of a manifest row. The file itself has no header row.
MANIFEST_COLUMNS = (
    "fileName",
    "fileSizeKB",
    "fileExtension",
    "lastModifiedTime",
    "creationTime",
    "author",
    "filePath",
    "filePermissions",
    "checksum",
    "contentSample",
)

# Names the downstream tabular importer gives to the same columns.
IMPORTER_COLUMN_NAMES = (
    "fileName",
    "fileSize(KB)",
    "fileExtension",
    "lastModifiedTime",
    "creationTime",
    "author",
    "filePath",
    "filePermissions",
    "sha256",
    "fileContent",
)


@dataclass(frozen=True)
class ManifestRecord:
    fileName: str
    fileSizeKB: int = 0
    fileExtension: str = ""
    lastModifiedTime: str = ""
    creationTime: str = ""
    author: str = ""
    filePath: str = ""
    filePermissions: str = ""
    checksum: str = ""
    contentSample: str = ""

    def as_row(self) -> tuple:
        return astuple(self)


@dataclass
class DirectoryNode:
    name: str
    path: str
    children: List["DirectoryNode"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "children": [c.to_dict() for c in self.children],
        }


@dataclass
class ManifestResult:
    output_path: str
    size_bytes: int
    records: int
    scanned_paths: List[str]
    elapsed_sec: float
