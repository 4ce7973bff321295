"""Backend package - prints the syntax tree into layout documents."""

from .path import Path
from .printer import print_doc, print_node

__all__ = ["Path", "print_doc", "print_node"]
