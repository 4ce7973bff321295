"""Middleend package - read-only analyses over the syntax tree."""

from .to_proc import to_proc

__all__ = ["to_proc"]
