from __future__ import annotations
import logging
import os
from typing import Any, Dict, FrozenSet, List, Tuple

from .errors import InvalidDirectoryError
from .models import DirectoryNode

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64

_Ident = Tuple[int, int]


def _ident(path: str) -> _Ident:
    st = os.stat(path)
    return (st.st_dev, st.st_ino)


def _node_name(path: str) -> str:
    return os.path.basename(path.rstrip("\\/")) or path


def _build(dir_path: str, ancestors: FrozenSet[_Ident], depth: int, max_depth: int) -> DirectoryNode:
    node = DirectoryNode(name=_node_name(dir_path), path=dir_path, children=[])
    if depth >= max_depth:
        logger.warning("Directory tree depth limit %d reached at %s", max_depth, dir_path)
        return node

    try:
        with os.scandir(dir_path) as it:
            entries = list(it)
    except OSError as e:
        logger.warning("Skipping directory %s: %s", dir_path, e)
        return node

    for entry in entries:
        try:
            if not entry.is_dir():
                continue
            ident = _ident(entry.path)
        except OSError as e:
            logger.warning("Skipping directory %s: %s", entry.path, e)
            continue
        if ident in ancestors:
            # symlink pointing back up the tree
            logger.warning("Skipping directory cycle at %s", entry.path)
            continue
        node.children.append(_build(entry.path, ancestors | {ident}, depth + 1, max_depth))

    node.children.sort(key=lambda n: n.name.lower())
    return node


def build_directory_tree(path: str, max_depth: int = DEFAULT_MAX_DEPTH) -> DirectoryNode:
    """Tree of the subdirectories under path, files omitted, children sorted case-insensitively.

    Unreadable subdirectories are left out with a warning. Directory symlinks
    that lead back to an ancestor are not followed, and recursion stops at
    max_depth levels below path.
    """
    root = os.path.abspath(path)
    if not os.path.isdir(root):
        raise InvalidDirectoryError(f"The provided path must be a directory: {path}")
    try:
        ident = _ident(root)
    except OSError as e:
        raise InvalidDirectoryError(f"Cannot read directory: {path}") from e
    return _build(root, frozenset({ident}), 0, max_depth)


def generate_directory_tree(path: str, max_depth: int = DEFAULT_MAX_DEPTH) -> List[Dict[str, Any]]:
    """Single-root list of {name, path, children} dicts, ready for JSON."""
    return [build_directory_tree(path, max_depth).to_dict()]
