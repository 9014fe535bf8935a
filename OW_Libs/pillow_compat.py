"""
Compatibility wrapper to import Pillow (which provides the `PIL` namespace).

This module loads the Pillow-provided modules via importlib and re-exports
the symbols the editing code needs: the `Image` module and the
`UnidentifiedImageError` raised when Pillow cannot recognise a file.
Importing from `pillow_compat` keeps one place where the dependency is
checked and a readable error is raised when it is missing.
"""
from importlib import import_module
from types import ModuleType
from typing import Optional


def _import(name: str) -> Optional[ModuleType]:
    try:
        return import_module(name)
    except ImportError:
        return None


_pil = _import("PIL")
_pil_image = _import("PIL.Image")

if _pil is None or _pil_image is None:
    raise ImportError("pillow (PIL) is required: install with 'pip install Pillow'")

Image = _pil_image

UnidentifiedImageError = getattr(_pil, "UnidentifiedImageError")

# High-quality filter used whenever an image is scaled down
LANCZOS = Image.Resampling.LANCZOS
