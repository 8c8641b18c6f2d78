"""Input validation with clear error messages."""

from __future__ import annotations

import numbers
from typing import Any

import numpy as np


class ColorParseError(ValueError):
    """Raised when a color specification cannot be understood."""


def validate_dimension(value: Any, name: str) -> int:
    """Validate a surface width or height. Returns it as an int."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TypeError(
            f"{name} must be a number, got {type(value).__name__}."
        )
    if not np.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}.")
    if value < 0:
        raise ValueError(f"{name} must be zero or positive, got {value}.")
    return int(value)


def validate_canvas(canvas: Any) -> Any:
    """Validate that canvas exposes width, height and get_context()."""
    missing = [
        attr for attr in ("width", "height", "get_context")
        if not hasattr(canvas, attr)
    ]
    if missing:
        raise TypeError(
            f"Expected a canvas-like object, got {type(canvas).__name__} "
            f"(missing: {', '.join(missing)}). "
            "Pass a drawing context with explicit width and height instead."
        )
    return canvas


def validate_context(context: Any) -> Any:
    """Validate that a 2d drawing context was actually obtained."""
    if context is None:
        raise ValueError(
            "get_context('2d') returned None; the surface cannot provide "
            "a 2d drawing context."
        )
    return context


def validate_gradient_table(table: Any) -> np.ndarray:
    """Validate a prebuilt gradient table. Returns it as a (256, 4) uint8 array."""
    if isinstance(table, (bytes, bytearray, memoryview)):
        arr = np.frombuffer(table, dtype=np.uint8)
    else:
        arr = np.asarray(table)
    if arr.size != 256 * 4:
        raise ValueError(
            f"A gradient table must hold exactly 1024 values (256 x RGBA), "
            f"got {arr.size}."
        )
    if arr.dtype != np.uint8:
        if not np.issubdtype(arr.dtype, np.number):
            raise ValueError(
                f"A gradient table must be numeric, got dtype {arr.dtype}."
            )
        arr = np.clip(np.rint(arr), 0, 255).astype(np.uint8)
    return arr.reshape(256, 4)
