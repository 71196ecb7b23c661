"""
Atomic file writer for generated files.

Ensures that file writes are atomic so an interrupted run never leaves a
half-written file behind.
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Mapping
from pathlib import Path

from ..config import OutputConfig, OutputMode

logger = logging.getLogger(__name__)


class AtomicWriter:
    """Writes generated files.

    Uses a two-phase approach:
    1. Write to a temporary file in the same directory
    2. Atomically replace the target file
    """

    def __init__(self, output: OutputConfig | None = None):
        """Initialize the writer.

        Args:
            output: Output configuration (mode and atomicity)
        """
        self.output = output or OutputConfig()

    def write(self, path: Path, content: str) -> None:
        """Write content to a file.

        Args:
            path: Target file path
            content: Content to write

        Raises:
            OSError: If file operations fail
        """
        # Ensure parent directory exists
        path.parent.mkdir(parents=True, exist_ok=True)

        if not self.output.atomic_write:
            path.write_text(content, encoding="utf-8")
            return

        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)
            temp_path.replace(path)
        except Exception:
            # Clean up temp file on any error
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    pass  # Best effort cleanup
            raise

    def write_all(self, output_dir: Path, files: Mapping[str, str]) -> list[Path]:
        """Write a set of rendered files below ``output_dir``.

        Existing files are checked before anything is written, so an
        ``ERROR_IF_EXISTS`` failure leaves the directory untouched.

        Args:
            output_dir: Output directory
            files: Mapping from relative POSIX path to content

        Returns:
            The written paths, sorted

        Raises:
            FileExistsError: If a file exists and the mode is ERROR_IF_EXISTS
        """
        targets = {output_dir.joinpath(*relative.split("/")): content for relative, content in sorted(files.items())}

        if self.output.mode is OutputMode.ERROR_IF_EXISTS:
            existing = [str(path) for path in targets if path.exists()]
            if existing:
                raise FileExistsError(
                    f"Output file(s) already exist: {', '.join(existing[:5])}"
                    f"{' ...' if len(existing) > 5 else ''}. Use force mode to overwrite."
                )

        for path, content in targets.items():
            self.write(path, content)
        logger.info("Wrote %d files to %s", len(targets), output_dir)
        return list(targets)
