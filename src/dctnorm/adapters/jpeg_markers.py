# src/dctnorm/adapters/jpeg_markers.py
from __future__ import annotations

"""
Lector de segmentos de marcador JPEG → JpegMetadata tipado.

Recorre el stream desde SOI hasta el primer SOS (inclusive) o EOI. No toca
los datos de entropía. Bytes extraños entre segmentos se saltan hasta el
próximo 0xFF con un aviso en el log, como hace libjpeg. Los segmentos conocidos (JFIF, Adobe APP14, SOFn,
SOS) se interpretan; el resto se conserva como AppSegment/OpaqueSegment.

Errores:
  - MalformedStreamError: el stream no es JPEG o está truncado.
  - InconsistentMetadataError: segmentos legibles pero contradictorios
    (APP14 incompleto o con transform desconocido, varios APP14 en
    conflicto, JFIF con un frame de 2 o 4 componentes, APP0/APP14 después
    del frame).
"""

import logging
from typing import List

from ..contracts.core import TransformCode
from ..contracts.errors import InconsistentMetadataError, MalformedStreamError
from ..contracts.markers import (
    APP0,
    APP14,
    EOI,
    RST_MARKERS,
    SOF_MARKERS,
    SOI,
    SOS,
    TEM,
    AdobeSegment,
    AppSegment,
    ComponentSpec,
    FrameSegment,
    JfifSegment,
    JpegMetadata,
    OpaqueSegment,
    ScanSegment,
)

logger = logging.getLogger(__name__)

_JFIF_ID = b"JFIF\x00"
_ADOBE_ID = b"Adobe"
_ADOBE_MIN_LEN = 12  # 'Adobe' + version(2) + flags0(2) + flags1(2) + transform(1)


def _u16(buf: bytes, i: int) -> int:
    return (buf[i] << 8) | buf[i + 1]


# ----------------------
# Segmentos individuales
# ----------------------

def _jfif(payload: bytes, offset: int) -> JfifSegment | AppSegment:
    if len(payload) < 12 or payload[7] > 2:
        # JFIF recortado: se conserva sin interpretar
        return AppSegment(offset=offset, index=0, payload=payload)
    return JfifSegment(
        offset=offset,
        version=(payload[5], payload[6]),
        units=payload[7],
        x_density=_u16(payload, 8),
        y_density=_u16(payload, 10),
    )


def _adobe(payload: bytes, offset: int) -> AdobeSegment:
    if len(payload) < _ADOBE_MIN_LEN:
        raise InconsistentMetadataError(
            f"APP14 Adobe incompleto en offset {offset}: {len(payload)} bytes"
        )
    code = payload[11]
    if code not in (0, 1, 2):
        raise InconsistentMetadataError(f"APP14 Adobe con transform desconocido: {code}")
    return AdobeSegment(
        offset=offset,
        version=_u16(payload, 5),
        flags0=_u16(payload, 7),
        flags1=_u16(payload, 9),
        transform=TransformCode(code),
    )


def _frame(marker: int, payload: bytes, offset: int) -> FrameSegment:
    if len(payload) < 6:
        raise MalformedStreamError(f"SOF incompleto en offset {offset}")
    nf = payload[5]
    if len(payload) < 6 + 3 * nf:
        raise MalformedStreamError(f"SOF declara {nf} componentes y no caben en el segmento")
    comps = []
    for i in range(nf):
        base = 6 + 3 * i
        hv = payload[base + 1]
        h, v, tq = hv >> 4, hv & 0x0F, payload[base + 2]
        if not (1 <= h <= 4 and 1 <= v <= 4 and tq <= 3):
            raise MalformedStreamError(f"Componente {i} inválido en SOF (h={h}, v={v}, tq={tq})")
        comps.append(ComponentSpec(id=payload[base], h_sampling=h, v_sampling=v, quant_table=tq))
    return FrameSegment(
        offset=offset,
        marker=marker,
        precision=payload[0],
        height=_u16(payload, 1),
        width=_u16(payload, 3),
        components=tuple(comps),
    )


def _scan(payload: bytes, offset: int) -> ScanSegment:
    if not payload:
        raise MalformedStreamError(f"SOS vacío en offset {offset}")
    ns = payload[0]
    if len(payload) < 1 + 2 * ns:
        raise MalformedStreamError(f"SOS declara {ns} componentes y no caben en el segmento")
    return ScanSegment(offset=offset, component_ids=tuple(payload[1 + 2 * i] for i in range(ns)))


def _typed(marker: int, payload: bytes, offset: int):
    if marker == APP0 and payload.startswith(_JFIF_ID):
        return _jfif(payload, offset)
    if marker == APP14 and payload.startswith(_ADOBE_ID):
        return _adobe(payload, offset)
    if APP0 <= marker <= 0xEF:
        return AppSegment(offset=offset, index=marker - APP0, payload=payload)
    if marker in SOF_MARKERS:
        return _frame(marker, payload, offset)
    if marker == SOS:
        return _scan(payload, offset)
    return OpaqueSegment(offset=offset, marker=marker, payload=payload)


# ----------------------
# Consistencia
# ----------------------

def check_consistency(md: JpegMetadata) -> None:
    adobes = [s for s in md.segments if isinstance(s, AdobeSegment)]
    codes = {int(a.transform) for a in adobes}
    if len(codes) > 1:
        raise InconsistentMetadataError(f"Varios APP14 Adobe en conflicto: transform={sorted(codes)}")

    frame = md.frame
    if frame is None:
        raise MalformedStreamError("Stream JPEG sin encabezado de frame (SOFn)")

    if md.jfif is not None and frame.num_components not in (1, 3):
        raise InconsistentMetadataError(
            f"Marcador JFIF con {frame.num_components} componentes (JFIF sólo admite 1 o 3)"
        )

    late = [s for s in md.segments if isinstance(s, (JfifSegment, AdobeSegment)) and s.offset > frame.offset]
    if late:
        raise InconsistentMetadataError(f"Segmento {late[0].kind} después del frame (offset {late[0].offset})")


# ----------------------
# API pública
# ----------------------

def read_jpeg_metadata(data: bytes) -> JpegMetadata:
    """Interpreta los segmentos de marcador de un stream JPEG completo."""
    n = len(data)
    if n < 2 or data[0] != 0xFF or data[1] != SOI:
        raise MalformedStreamError("No es un stream JPEG (falta SOI)")

    segments: List[object] = []
    pos = 2
    while pos < n:
        if data[pos] != 0xFF:
            # bytes extraños antes del marcador: se resincroniza en el próximo 0xFF
            nxt = data.find(b"\xFF", pos)
            skipped = (n if nxt < 0 else nxt) - pos
            logger.warning("JPEG: %d bytes extraños antes de un marcador en offset %d", skipped, pos)
            if nxt < 0:
                break
            pos = nxt
        start = pos
        while pos < n and data[pos] == 0xFF:  # bytes de relleno
            pos += 1
        if pos >= n:
            raise MalformedStreamError("Stream truncado tras 0xFF")
        marker = data[pos]
        pos += 1
        if marker == EOI:
            break
        if marker in RST_MARKERS or marker in (TEM, SOI):
            continue
        if pos + 2 > n:
            raise MalformedStreamError(f"Largo de segmento truncado en offset {start}")
        length = _u16(data, pos)
        end = pos + length
        if length < 2 or end > n:
            raise MalformedStreamError(f"Segmento 0x{marker:02X} en offset {start} excede el stream")
        segments.append(_typed(marker, bytes(data[pos + 2:end]), start))
        pos = end
        if marker == SOS:
            break

    md = JpegMetadata(segments=tuple(segments))
    check_consistency(md)
    logger.debug(
        "JPEG: %d segmentos, %s componentes%s",
        len(md.segments), md.num_components, " (progresivo)" if md.frame.progressive else "",
    )
    return md


__all__ = ["read_jpeg_metadata", "check_consistency"]
