"""
Backends module.

Renders the assembled virtual file tree to source text.
"""

from __future__ import annotations

from .typescript_backend import TypeScriptBackend

__all__ = ["TypeScriptBackend"]
