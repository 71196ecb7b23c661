"""
Assembly module.

Groups the final definitions into virtual files, resolves cross-file
imports and builds the re-export index files.
"""

from __future__ import annotations

from .files import assemble_files, output_path
from .nodes import INDEX_FILE_NAME, FileTree, IndexFile, VirtualFile, relative_module
from .reexport import build_indexes, check_reachability, reachable_names

__all__ = [
    "INDEX_FILE_NAME",
    "FileTree",
    "IndexFile",
    "VirtualFile",
    "assemble_files",
    "build_indexes",
    "check_reachability",
    "output_path",
    "reachable_names",
    "relative_module",
]
