# src/dctnorm/ports/stream_filter.py
from __future__ import annotations

from typing import Any, BinaryIO, Mapping, Optional, Protocol, runtime_checkable

FilterOptions = Mapping[str, Any]

@runtime_checkable
class StreamFilterPort(Protocol):
    """
    Filtro de stream de documento (p.ej. DCTDecode).
    `options` son los parámetros del diccionario del stream; `filter_index`
    es la posición del filtro en la cadena (sólo para contexto de errores).
    """
    def decode(self, source: BinaryIO, sink: BinaryIO, options: Optional[FilterOptions] = None, filter_index: int = 0) -> Any: ...
    def encode(self, source: BinaryIO, sink: BinaryIO, options: Optional[FilterOptions] = None, filter_index: int = 0) -> Any: ...

__all__ = ["StreamFilterPort", "FilterOptions"]
