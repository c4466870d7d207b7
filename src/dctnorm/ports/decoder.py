# src/dctnorm/ports/decoder.py
from __future__ import annotations

from typing import Protocol, runtime_checkable
from ..contracts.markers import JpegMetadata
from ..contracts.raster import Raster

@runtime_checkable
class JpegDecoderPort(Protocol):
    """
    Proveedor de decodificación JPEG (entropía, IDCT, upsampling).
    Reglas:
      - read_raster() entrega el layout nativo: 3 bandas intercaladas BGR;
        4 bandas con los componentes crudos del stream (sin conversión YCC).
      - image_metadata() puede lanzar InconsistentMetadataError o
        MalformedStreamError.
    """
    def name(self) -> str: ...
    def can_read_raster(self) -> bool: ...
    def read_raster(self, data: bytes) -> Raster: ...
    def image_metadata(self, data: bytes) -> JpegMetadata: ...

__all__ = ["JpegDecoderPort"]
