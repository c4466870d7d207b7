# src/dctnorm/services/channel_transform.py
from __future__ import annotations

"""
Normalización de canales de un raster JPEG decodificado.

Despacho por número de bandas:
  • 3 bandas: BGR → RGB (permutación pura, sin aritmética).
  • 4 bandas: según el código Adobe
      - UNKNOWN: ya es CMYK, se devuelve tal cual.
      - YCBCR: no implementado; aviso y se devuelve tal cual.
      - YCCK: conversión YCCK → CMYK (abajo).
  • Otro número de bandas: sin transformación.

YCCK → CMYK por píxel, en float32 y en este orden de operaciones:
    r = clamp(Y + 1.402*Cr - 179.456)
    g = clamp(Y - 0.34414*Cb - 0.71414*Cr + 135.45984)
    b = clamp(Y + 1.772*Cb - 226.816)
    C, M, Y' = 255 - r, 255 - g, 255 - b ;  K sin cambios
clamp: <0 → 0, >255 → 255, si no truncado hacia cero. Aproximación con
pérdida, no invertible; no hay gestión de color.
"""

import logging
from typing import Optional

import numpy as np

from ..contracts.core import DecodeWarning, Outcome, TransformCode, WarningKind
from ..contracts.raster import Raster

logger = logging.getLogger(__name__)

# Constantes en float32: deben coincidir bit a bit con la aritmética de referencia
_F = np.float32
_CR_R, _OFF_R = _F(1.402), _F(179.456)
_CB_G, _CR_G, _OFF_G = _F(0.34414), _F(0.71414), _F(135.45984)
_CB_B, _OFF_B = _F(1.772), _F(226.816)


def _clamp(v: np.ndarray) -> np.ndarray:
    # np.clip y luego cast: el cast a uint8 trunca hacia cero en [0, 255]
    return np.clip(v, 0, 255).astype(np.uint8)


def bgr_to_rgb(raster: Raster) -> Raster:
    if raster.bands != 3:
        raise ValueError(f"BGR→RGB requiere 3 bandas; recibió {raster.bands}")
    return Raster(raster.data[:, :, ::-1])


def ycck_to_cmyk(raster: Raster) -> Raster:
    if raster.bands != 4:
        raise ValueError(f"YCCK→CMYK requiere 4 bandas; recibió {raster.bands}")
    src = raster.data
    y = src[:, :, 0].astype(np.float32)
    cb = src[:, :, 1].astype(np.float32)
    cr = src[:, :, 2].astype(np.float32)

    r = _clamp(y + _CR_R * cr - _OFF_R)
    g = _clamp(y - _CB_G * cb - _CR_G * cr + _OFF_G)
    b = _clamp(y + _CB_B * cb - _OFF_B)

    out = np.empty_like(src)
    out[:, :, 0] = 255 - r
    out[:, :, 1] = 255 - g
    out[:, :, 2] = 255 - b
    out[:, :, 3] = src[:, :, 3]
    return Raster(out)


def normalize_channels(raster: Raster, transform: Optional[TransformCode] = None, *, filter_index: Optional[int] = None) -> Outcome[Raster]:
    """Devuelve un raster de la misma forma con canales en orden canónico."""
    if raster.bands == 3:
        return Outcome(bgr_to_rgb(raster))

    if raster.bands == 4:
        code = TransformCode.UNKNOWN if transform is None else TransformCode(transform)
        if code is TransformCode.YCCK:
            return Outcome(ycck_to_cmyk(raster))
        if code is TransformCode.YCBCR:
            msg = "JPEG YCbCr de 4 componentes no implementado; se entrega sin convertir"
            logger.warning(msg)
            w = DecodeWarning(kind=WarningKind.UNSUPPORTED_TRANSFORM, message=msg, filter_index=filter_index)
            return Outcome(raster, (w,))
        return Outcome(raster)  # ya es CMYK

    return Outcome(raster)


__all__ = ["bgr_to_rgb", "ycck_to_cmyk", "normalize_channels"]
