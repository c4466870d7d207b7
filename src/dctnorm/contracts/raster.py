# src/dctnorm/contracts/raster.py

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Tuple

import numpy as np
import numpy.typing as npt

# ---------- Raster decodificado (puro dominio) ----------
@dataclass(frozen=True)
class Raster:
    """
    Grilla de píxeles `(height, width, bands)` con muestras uint8 intercaladas.
    Se guarda una copia propia en sólo-lectura: el arreglo del llamador no se
    congela y mutarlo (o a su base) no altera el raster.
    """
    data: "npt.NDArray[Any]"  # type: ignore[valid-type]

    def __post_init__(self):
        arr = self.data
        if not isinstance(arr, np.ndarray):
            raise TypeError(f"Raster espera numpy.ndarray, recibió {type(arr).__name__}")
        if arr.dtype != np.uint8:
            raise ValueError(f"dtype no soportado: {arr.dtype} (se espera uint8)")
        if arr.ndim != 3:
            raise ValueError(f"Se esperaba arreglo 3D (alto, ancho, bandas); ndim={arr.ndim}")
        if arr.shape[2] < 1:
            raise ValueError("Raster sin bandas")
        own = np.array(arr, dtype=np.uint8, order="C", copy=True)
        own.setflags(write=False)
        object.__setattr__(self, "data", own)

    # ---------- constructores ----------
    @staticmethod
    def from_array(arr: "npt.ArrayLike") -> "Raster":
        a = np.asarray(arr)
        if a.ndim == 2:
            a = a[:, :, np.newaxis]
        return Raster(a)

    @staticmethod
    def from_bytes(buf: bytes, width: int, height: int, bands: int) -> "Raster":
        expected = width * height * bands
        if len(buf) != expected:
            raise ValueError(f"Largo de buffer {len(buf)} != {width}x{height}x{bands}={expected}")
        arr = np.frombuffer(buf, dtype=np.uint8).reshape((height, width, bands))
        return Raster(arr)

    # ---------- forma ----------
    @property
    def shape(self) -> Tuple[int, int, int]:
        return self.data.shape  # type: ignore[return-value]

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def bands(self) -> int:
        return int(self.data.shape[2])

    def same_shape(self, other: "Raster") -> bool:
        return self.shape == other.shape

    # ---------- salida empaquetada ----------
    def to_bytes(self) -> bytes:
        """Bytes row-major, bandas intercaladas; largo == width*height*bands."""
        return np.ascontiguousarray(self.data).tobytes()


__all__ = ["Raster"]
