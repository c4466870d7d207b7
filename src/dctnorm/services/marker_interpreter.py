# src/dctnorm/services/marker_interpreter.py
from __future__ import annotations

"""
Lectura del código de transformación Adobe APP14.

  • Hay segmento Adobe → su `transform` (0, 1 o 2).
  • No hay segmento Adobe → UNKNOWN (ya es CMYK, sin transformar).
  • InconsistentMetadataError → aviso y `policy.assume` (YCCK por omisión).

La última regla es heurística: los metadatos inconsistentes de este tipo
suelen venir de imágenes YCCK, sin garantía. Por eso es una política
explícita que se puede desactivar (el error se propaga) o redirigir a otro
código. Cualquier otro error de metadatos se propaga.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..contracts.core import DecodeWarning, Outcome, TransformCode, WarningKind
from ..contracts.errors import InconsistentMetadataError
from ..ports.decoder import JpegDecoderPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InconsistentMetadataPolicy:
    enabled: bool = True
    assume: TransformCode = TransformCode.YCCK


def read_adobe_transform(
    decoder: JpegDecoderPort,
    data: bytes,
    policy: InconsistentMetadataPolicy = InconsistentMetadataPolicy(),
    *,
    filter_index: Optional[int] = None,
) -> Outcome[TransformCode]:
    try:
        metadata = decoder.image_metadata(data)
    except InconsistentMetadataError as e:
        if not policy.enabled:
            if e.filter_index is None:
                e.filter_index = filter_index
            raise
        msg = f"Metadatos inconsistentes en el stream JPEG ({e.message}); se asume {policy.assume.name}"
        logger.warning(msg)
        w = DecodeWarning(kind=WarningKind.INCONSISTENT_METADATA, message=msg, filter_index=filter_index)
        return Outcome(policy.assume, (w,))

    adobe = metadata.adobe
    if adobe is None:
        return Outcome(TransformCode.UNKNOWN)
    return Outcome(TransformCode(adobe.transform))


__all__ = ["InconsistentMetadataPolicy", "read_adobe_transform"]
