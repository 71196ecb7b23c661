"""
Pipeline generator.

Runs the phases in order:

1. Mutators: combine filters, strip atomic operations, rename, deduplicate
2. Assembly: group declarations into files, resolve imports, build indexes
3. Backend: render every file to TypeScript
4. Writer: write the files atomically
"""

from __future__ import annotations

import logging
from pathlib import Path

from .assembly import FileTree, assemble_files
from .backends import TypeScriptBackend
from .config import CodeGeneratorConfig
from .definitions import DefinitionSet
from .mutators import mutate_definitions
from .writer import AtomicWriter

logger = logging.getLogger(__name__)


class PipelineGenerator:
    """Generates the declaration files of a definition set."""

    def __init__(
        self,
        definitions: DefinitionSet,
        config: CodeGeneratorConfig | None = None,
        generation_comment: str = "",
    ):
        """
        Initialize the generator.

        Args:
            definitions: The definition set produced by the schema parser
            config: Code generation configuration
            generation_comment: Comment heading every generated file
        """
        self.definitions = definitions
        self.config = config or CodeGeneratorConfig()
        self.generation_comment = generation_comment
        self._mutated: DefinitionSet | None = None
        self._tree: FileTree | None = None

    def mutate(self) -> DefinitionSet:
        """Run the mutators once and return the final definition set."""
        if self._mutated is None:
            logger.info("Mutating %d types and %d enums", len(self.definitions), len(self.definitions.enums))
            self._mutated = mutate_definitions(self.definitions, self.config)
        return self._mutated

    def assemble(self) -> FileTree:
        """Build the virtual file tree."""
        if self._tree is None:
            self._tree = assemble_files(self.mutate(), self.config)
        return self._tree

    def generate(self) -> dict[str, str]:
        """
        Render every output file.

        Returns:
            Mapping from relative path to source text
        """
        backend = TypeScriptBackend(self.config, self.generation_comment)
        return backend.render_tree(self.assemble())

    def write(self, output_dir: str | Path) -> list[Path]:
        """
        Generate and write every output file below ``output_dir``.

        Nothing is written unless the whole generation succeeds.

        Returns:
            The written paths
        """
        files = self.generate()
        writer = AtomicWriter(self.config.output)
        return writer.write_all(Path(output_dir), files)
