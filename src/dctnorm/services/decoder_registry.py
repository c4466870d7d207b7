# src/dctnorm/services/decoder_registry.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from ..contracts.errors import MissingDecoderCapabilityError
from ..ports.decoder import JpegDecoderPort

logger = logging.getLogger(__name__)

DecoderPredicate = Callable[[JpegDecoderPort], bool]


def can_read_raster(decoder: JpegDecoderPort) -> bool:
    return decoder.can_read_raster()


@dataclass
class DecoderRegistry:
    """Colección ordenada de proveedores JPEG; gana el primero que cumple el predicado."""
    providers: List[JpegDecoderPort] = field(default_factory=list)

    def register(self, provider: JpegDecoderPort, *, first: bool = False) -> None:
        if not isinstance(provider, JpegDecoderPort):
            raise TypeError(f"{provider!r} no implementa JpegDecoderPort")
        if first:
            self.providers.insert(0, provider)
        else:
            self.providers.append(provider)

    def names(self) -> Tuple[str, ...]:
        return tuple(p.name() for p in self.providers)

    def __len__(self) -> int:
        return len(self.providers)

    def select(self, predicate: DecoderPredicate = can_read_raster, *, filter_index: Optional[int] = None) -> JpegDecoderPort:
        for p in self.providers:
            if predicate(p):
                logger.debug("Decodificador JPEG seleccionado: %s", p.name())
                return p
            logger.debug("Decodificador %s descartado (no capaz)", p.name())
        raise MissingDecoderCapabilityError(
            "No se puede leer la imagen JPEG: no hay un decodificador JPEG capaz registrado "
            f"(proveedores: {list(self.names()) or 'ninguno'})",
            filter_index=filter_index,
        )


__all__ = ["DecoderRegistry", "DecoderPredicate", "can_read_raster"]
