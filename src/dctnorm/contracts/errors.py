# src/dctnorm/contracts/errors.py
from __future__ import annotations

from typing import Optional


class DCTFilterError(Exception):
    """Base de errores del filtro DCT. `filter_index` sólo sirve de contexto."""

    def __init__(self, message: str, *, filter_index: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.filter_index = filter_index

    def __str__(self) -> str:
        if self.filter_index is None:
            return self.message
        return f"{self.message} (filtro #{self.filter_index})"


class MissingDecoderCapabilityError(DCTFilterError):
    """No hay decodificador JPEG capaz registrado. Fatal, no reintentable."""


class DecodeError(DCTFilterError):
    """Falla del paso de decodificación delegado."""


class MalformedStreamError(DecodeError):
    """Los bytes comprimidos no se pueden interpretar como JPEG."""


class InconsistentMetadataError(DecodeError):
    """Metadatos por imagen inconsistentes (peculiaridad conocida de decodificadores)."""


__all__ = [
    "DCTFilterError",
    "MissingDecoderCapabilityError",
    "DecodeError",
    "MalformedStreamError",
    "InconsistentMetadataError",
]
