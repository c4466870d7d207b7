# src/dctnorm/services/dct_decode_service.py
from __future__ import annotations

"""
Servicio DCTDecode (orquestador)

Flujo de decode(data):
  1. Selecciona el primer decodificador capaz del registro; si no hay,
     MissingDecoderCapabilityError (antes de tocar los datos).
  2. Decodifica a Raster (errores del decodificador se propagan).
  3. 4 bandas → lee el código Adobe APP14 (marker_interpreter).
  4. Normaliza canales (channel_transform): BGR→RGB, YCCK→CMYK, etc.
  5. Devuelve el raster y sus bytes empaquetados (w*h*bandas, sin cabecera).

encode() es un no-op documentado: no produce bytes y deja un aviso.

Cada llamada es independiente: sin estado compartido ni buffers reutilizados.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..config import Settings, get_settings
from ..contracts.core import DecodeWarning, Outcome, TransformCode, WarningKind
from ..contracts.errors import DCTFilterError
from ..contracts.raster import Raster
from .channel_transform import normalize_channels
from .decoder_registry import DecoderRegistry
from .marker_interpreter import read_adobe_transform

logger = logging.getLogger(__name__)


# ----------------------
# DTOs
# ----------------------

@dataclass(frozen=True)
class DecodeResult:
    raster: Raster
    decoder: str
    transform: Optional[TransformCode] = None   # sólo para 4 bandas
    warnings: Tuple[DecodeWarning, ...] = ()

    @property
    def payload(self) -> bytes:
        return self.raster.to_bytes()

    @property
    def degraded(self) -> bool:
        return bool(self.warnings)


# ----------------------
# Servicio
# ----------------------

@dataclass
class DCTDecodeService:
    registry: DecoderRegistry = field(default_factory=DecoderRegistry)
    settings: Settings = field(default_factory=get_settings)

    def decode(self, data: bytes, *, filter_index: int = 0) -> DecodeResult:
        decoder = self.registry.select(filter_index=filter_index)
        try:
            raster = decoder.read_raster(data)
            tr = None
            if raster.bands == 4:
                tr = read_adobe_transform(decoder, data, self.settings.metadata_policy(), filter_index=filter_index)
        except DCTFilterError as e:
            if e.filter_index is None:
                e.filter_index = filter_index
            raise

        transform: Optional[TransformCode] = None
        warnings: Tuple[DecodeWarning, ...] = ()
        if tr is not None:
            transform, warnings = tr.value, tr.warnings
            logger.debug("JPEG de 4 componentes, transform=%s", transform.name)

        norm = normalize_channels(raster, transform, filter_index=filter_index)
        return DecodeResult(
            raster=norm.value,
            decoder=decoder.name(),
            transform=transform,
            warnings=warnings + norm.warnings,
        )

    def encode(self, data: bytes = b"", *, filter_index: int = 0) -> Outcome[bytes]:
        msg = "DCTEncode no está implementado; se omite este stream"
        logger.warning(msg)
        return Outcome(b"", (DecodeWarning(kind=WarningKind.ENCODE_UNSUPPORTED, message=msg, filter_index=filter_index),))


__all__ = ["DCTDecodeService", "DecodeResult"]
