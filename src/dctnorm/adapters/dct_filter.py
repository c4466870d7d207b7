# src/dctnorm/adapters/dct_filter.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import BinaryIO, Optional

from ..contracts.core import Outcome
from ..ports.stream_filter import FilterOptions, StreamFilterPort
from ..services.dct_decode_service import DCTDecodeService, DecodeResult

logger = logging.getLogger(__name__)


@dataclass
class DCTFilter(StreamFilterPort):
    """Filtro `DCTDecode` sobre streams binarios.

    Lee el stream comprimido completo, delega en DCTDecodeService y escribe
    el raster empaquetado sólo si la decodificación terminó bien: ante un
    error el sink no recibe ningún byte. `options` no se usan.
    """
    service: DCTDecodeService = field(default_factory=DCTDecodeService)

    def decode(self, source: BinaryIO, sink: BinaryIO, options: Optional[FilterOptions] = None, filter_index: int = 0) -> DecodeResult:
        if options:
            logger.debug("DCTDecode ignora parámetros: %s", sorted(options))
        data = source.read()
        result = self.service.decode(data, filter_index=filter_index)
        sink.write(result.payload)
        return result

    def encode(self, source: BinaryIO, sink: BinaryIO, options: Optional[FilterOptions] = None, filter_index: int = 0) -> Outcome[bytes]:
        # `source` no se lee
        return self.service.encode(filter_index=filter_index)


__all__ = ["DCTFilter"]
