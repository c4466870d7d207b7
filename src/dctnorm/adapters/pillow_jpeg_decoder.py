# src/dctnorm/adapters/pillow_jpeg_decoder.py
from __future__ import annotations

from dataclasses import dataclass

import io
import logging
import numpy as np

# Pillow es el backend JPEG; sin él el proveedor se reporta no capaz
try:
    from PIL import Image, UnidentifiedImageError, features
    _HAS_PIL = True
except Exception:  # pragma: no cover
    _HAS_PIL = False

from ..contracts.errors import DecodeError, MalformedStreamError, MissingDecoderCapabilityError
from ..contracts.markers import JpegMetadata
from ..contracts.raster import Raster
from ..ports.decoder import JpegDecoderPort
from .jpeg_markers import read_jpeg_metadata

logger = logging.getLogger(__name__)

# (rawmode, jpegmode): jpegmode == modo de salida → libjpeg no convierte color
_RAW_CMYK_ARGS = ("CMYK", "CMYK")


@dataclass(frozen=True)
class PillowJpegDecoder(JpegDecoderPort):
    """Decodificador JPEG sobre Pillow/libjpeg.

    Regla de layout: 3 componentes se entregan **BGR** intercalado; 4
    componentes se entregan crudos (YCCK o CMYK tal como vienen en el stream).
    """

    def name(self) -> str:
        return "pillow"

    def can_read_raster(self) -> bool:
        if not _HAS_PIL:
            return False
        Image.init()
        return "JPEG" in Image.OPEN and bool(features.check_codec("jpg"))

    # --------------- decodificación ---------------
    @staticmethod
    def _native_array(im: "Image.Image") -> np.ndarray:
        if im.mode == "CMYK":
            im.tile = [(t[0], t[1], t[2], _RAW_CMYK_ARGS) for t in im.tile]
        im.load()
        if im.mode == "CMYK":
            return np.asarray(im)
        if im.mode == "RGB":
            return np.asarray(im)[:, :, ::-1]
        if im.mode == "L":
            return np.asarray(im)
        raise DecodeError(f"Modo JPEG no soportado por Pillow: {im.mode}")

    def read_raster(self, data: bytes) -> Raster:
        if not _HAS_PIL:
            raise MissingDecoderCapabilityError("Pillow no está instalado (pip install Pillow)")
        try:
            with Image.open(io.BytesIO(data), formats=["JPEG"]) as im:
                arr = self._native_array(im)
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
            raise MalformedStreamError(f"No se pudo decodificar el JPEG: {e}") from e
        logger.debug("Pillow: raster %s", arr.shape)
        return Raster.from_array(arr)

    # --------------- metadatos ---------------
    def image_metadata(self, data: bytes) -> JpegMetadata:
        return read_jpeg_metadata(data)


__all__ = ["PillowJpegDecoder"]
