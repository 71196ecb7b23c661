"""
Virtual file tree nodes.

A virtual file describes one output file before rendering: what it
declares and what it imports from which other file. Paths are POSIX
style and relative to the output directory.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field

from ..definitions.nodes import EnumDefinition, TypeDefinition

INDEX_FILE_NAME = "index.ts"

Declaration = TypeDefinition | EnumDefinition


@dataclass
class VirtualFile:
    """One output file holding one or more declarations."""

    path: str = ""
    declarations: list[Declaration] = field(default_factory=list)
    exported_names: set[str] = field(default_factory=set)

    # Other file path -> names imported from it
    required_imports: dict[str, set[str]] = field(default_factory=dict)

    @property
    def directory(self) -> str:
        return posixpath.dirname(self.path)


@dataclass
class IndexFile:
    """An index file that only re-exports names declared elsewhere."""

    path: str = ""

    # Declaration file or child index path -> names re-exported from it
    reexports: dict[str, set[str]] = field(default_factory=dict)

    @property
    def directory(self) -> str:
        return posixpath.dirname(self.path)

    def names(self) -> set[str]:
        return set().union(*self.reexports.values())


@dataclass
class FileTree:
    """The complete assembled output."""

    files: dict[str, VirtualFile] = field(default_factory=dict)
    indexes: dict[str, IndexFile] = field(default_factory=dict)

    def paths(self) -> list[str]:
        return sorted([*self.files, *self.indexes])

    def file_of(self, name: str) -> VirtualFile | None:
        """The file declaring ``name``."""
        for virtual_file in self.files.values():
            if name in virtual_file.exported_names:
                return virtual_file
        return None

    @property
    def root_index(self) -> IndexFile | None:
        return self.indexes.get(INDEX_FILE_NAME)


def relative_module(from_path: str, to_path: str) -> str:
    """Module specifier to import ``to_path`` from a file at ``from_path``.

    >>> relative_module("post/post.model.ts", "user/user.model.ts")
    '../user/user.model'
    >>> relative_module("index.ts", "user/index.ts")
    './user'
    """
    target, _ = posixpath.splitext(to_path)
    if posixpath.basename(to_path) == INDEX_FILE_NAME:
        target = posixpath.dirname(to_path)
    relative = posixpath.relpath(target or ".", posixpath.dirname(from_path) or ".")
    if not relative.startswith("."):
        relative = f"./{relative}"
    return relative
