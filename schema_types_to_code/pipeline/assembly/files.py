"""
Partition the final definitions into virtual files and resolve imports.
"""

from __future__ import annotations

import logging
import posixpath

from ...utils import strip_suffix, to_kebab_case
from ..config import CodeGeneratorConfig, ReExport
from ..definitions.nodes import DefinitionSet, EnumDefinition, EnumRef, NamedRef, TypeDefinition, TypeKind, iter_refs
from ..errors import DanglingReferenceError, NamingCollisionError
from .nodes import INDEX_FILE_NAME, Declaration, FileTree, VirtualFile
from .reexport import build_indexes, check_reachability

logger = logging.getLogger(__name__)

# Kind suffix dropped from the {name} token, "UserWhereInput" -> "user-where"
_NAME_SUFFIXES = {
    TypeKind.INPUT: "Input",
    TypeKind.ARGS: "Args",
    TypeKind.OUTPUT: "Output",
}


def type_token(declaration: Declaration) -> str:
    if isinstance(declaration, EnumDefinition):
        return "enum"
    return declaration.kind.value


def name_token(declaration: Declaration) -> str:
    name = declaration.name
    if isinstance(declaration, TypeDefinition):
        name = strip_suffix(name, _NAME_SUFFIXES.get(declaration.kind, ""))
    return to_kebab_case(name)


def model_token(declaration: Declaration, config: CodeGeneratorConfig) -> str:
    entity = declaration.source_entity
    if entity is None and isinstance(declaration, TypeDefinition) and declaration.kind is TypeKind.MODEL:
        entity = declaration.name
    if entity is None:
        return config.shared_directory
    return to_kebab_case(entity)


def output_path(declaration: Declaration, config: CodeGeneratorConfig) -> str:
    """
    Render the output file pattern for one declaration.

    Args:
        declaration: A type or enum definition
        config: Code generation configuration

    Returns:
        The POSIX path of the file, relative to the output directory
    """
    path = config.output_file_pattern
    path = path.replace("{model}", model_token(declaration, config))
    path = path.replace("{name}", name_token(declaration))
    path = path.replace("{type}", type_token(declaration))
    return posixpath.normpath(path)


def _partition(definitions: DefinitionSet, config: CodeGeneratorConfig) -> dict[str, VirtualFile]:
    one_per_declaration = "name" in config.pattern_tokens()
    files: dict[str, VirtualFile] = {}

    declarations: list[Declaration] = [*definitions.enums.values(), *definitions]
    for declaration in declarations:
        path = output_path(declaration, config)
        if config.reexport is not ReExport.NONE and posixpath.basename(path) == INDEX_FILE_NAME:
            raise NamingCollisionError(declaration.name, INDEX_FILE_NAME, f"{path} is reserved for re-exports")

        virtual_file = files.get(path)
        if virtual_file is None:
            virtual_file = files[path] = VirtualFile(path=path)
        elif one_per_declaration:
            raise NamingCollisionError(virtual_file.declarations[0].name, declaration.name, f"both written to {path}")

        virtual_file.declarations.append(declaration)
        virtual_file.exported_names.add(declaration.name)
    return files


def _resolve_imports(files: dict[str, VirtualFile]) -> None:
    declared_in = {name: virtual_file.path for virtual_file in files.values() for name in virtual_file.exported_names}

    for virtual_file in files.values():
        for declaration in virtual_file.declarations:
            if not isinstance(declaration, TypeDefinition):
                continue
            for f in declaration.fields:
                for ref in iter_refs(f.type_ref):
                    if not isinstance(ref, NamedRef | EnumRef):
                        continue
                    target = declared_in.get(ref.name)
                    if target is None:
                        raise DanglingReferenceError(declaration.name, f.name, ref.name, "file assembly")
                    if target != virtual_file.path:
                        virtual_file.required_imports.setdefault(target, set()).add(ref.name)


def assemble_files(definitions: DefinitionSet, config: CodeGeneratorConfig) -> FileTree:
    """
    Build the virtual file tree for the final definition set.

    Args:
        definitions: The final definition set
        config: Code generation configuration

    Returns:
        The file tree with declaration files and index files

    Raises:
        NamingCollisionError: If two declarations claim the same file
        GeneratorError: If a declaration is not reachable from the root index
    """
    files = _partition(definitions, config)
    _resolve_imports(files)
    tree = FileTree(files=files, indexes=build_indexes(files, config.reexport))
    if config.reexport is ReExport.ALL:
        check_reachability(tree)

    logger.info("Assembled %d files and %d index files", len(tree.files), len(tree.indexes))
    return tree
