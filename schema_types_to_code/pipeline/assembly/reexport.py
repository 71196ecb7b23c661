"""
Build index files re-exporting every declaration.

Each output directory gets an ``index.ts`` re-exporting the declarations
of its files and the names of its child directory indexes. With
``ReExport.ALL`` every ancestor directory up to the root gets one too, so
every declaration is reachable from the root ``index.ts``.
"""

from __future__ import annotations

import posixpath

from ..config import ReExport
from ..errors import GeneratorError
from .nodes import INDEX_FILE_NAME, FileTree, IndexFile, VirtualFile


def _index_path(directory: str) -> str:
    return posixpath.join(directory, INDEX_FILE_NAME) if directory else INDEX_FILE_NAME


def _ancestors(directory: str) -> list[str]:
    result = []
    while directory:
        directory = posixpath.dirname(directory)
        result.append(directory)
    return result


def build_indexes(files: dict[str, VirtualFile], mode: ReExport) -> dict[str, IndexFile]:
    """
    Create index files for the given declaration files.

    Args:
        files: Declaration files by path
        mode: Which indexes to create

    Returns:
        Index files by path
    """
    if mode is ReExport.NONE:
        return {}

    directories = {virtual_file.directory for virtual_file in files.values()}
    if mode is ReExport.ALL:
        for directory in list(directories):
            directories.update(_ancestors(directory))

    indexes = {_index_path(d): IndexFile(path=_index_path(d)) for d in directories}

    for virtual_file in files.values():
        index = indexes[_index_path(virtual_file.directory)]
        index.reexports[virtual_file.path] = set(virtual_file.exported_names)

    # Deepest directories first, so a child index is complete before its parent reads it
    for directory in sorted(directories, key=lambda d: d.count("/") + bool(d), reverse=True):
        if not directory:
            continue
        parent = indexes.get(_index_path(posixpath.dirname(directory)))
        child = indexes[_index_path(directory)]
        if parent is not None and child.reexports:
            parent.reexports[child.path] = child.names()

    return indexes


def reachable_names(tree: FileTree) -> set[str]:
    """Names reachable from the root index through re-exports."""
    root = tree.root_index
    if root is None:
        return set()

    names: set[str] = set()
    pending = [root]
    seen = {root.path}
    while pending:
        index = pending.pop()
        for target, exported in index.reexports.items():
            child = tree.indexes.get(target)
            if child is not None:
                if target not in seen:
                    seen.add(target)
                    pending.append(child)
            elif target in tree.files:
                names |= exported & tree.files[target].exported_names
    return names


def check_reachability(tree: FileTree) -> None:
    """
    Verify every declaration is reachable from the root index.

    Raises:
        GeneratorError: Naming the orphaned declarations
    """
    declared = set().union(*(f.exported_names for f in tree.files.values()))
    orphans = declared - reachable_names(tree)
    if orphans:
        raise GeneratorError(f"Declarations not reachable from the root index: {', '.join(sorted(orphans))}")
