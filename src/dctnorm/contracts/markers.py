# src/dctnorm/contracts/markers.py
from __future__ import annotations

from typing import Annotated, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from .core import TransformCode

# -------------------------
# Códigos de marcador JPEG (segundo byte tras 0xFF)
# -------------------------
SOI = 0xD8
EOI = 0xD9
SOS = 0xDA
TEM = 0x01
APP0 = 0xE0
APP14 = 0xEE
RST_MARKERS = frozenset(range(0xD0, 0xD8))
# SOF0..SOF15 salvo DHT (C4), JPG (C8) y DAC (CC)
SOF_MARKERS = frozenset(range(0xC0, 0xD0)) - {0xC4, 0xC8, 0xCC}

# -------------------------
# Segmentos tipados
# -------------------------
class _Segment(BaseModel):
    model_config = ConfigDict(frozen=True)
    offset: int = Field(0, ge=0)  # posición del 0xFF en el stream


class JfifSegment(_Segment):
    kind: Literal["jfif"] = "jfif"
    version: Tuple[int, int] = (1, 1)
    units: int = Field(0, ge=0, le=2)
    x_density: int = Field(1, ge=0)
    y_density: int = Field(1, ge=0)


class AdobeSegment(_Segment):
    """APP14 'Adobe': versión, flags y código de transformación de color."""
    kind: Literal["adobe"] = "adobe"
    version: int = 100
    flags0: int = 0
    flags1: int = 0
    transform: TransformCode = TransformCode.UNKNOWN


class ComponentSpec(BaseModel):
    model_config = ConfigDict(frozen=True)
    id: int = Field(ge=0, le=255)
    h_sampling: int = Field(1, ge=1, le=4)
    v_sampling: int = Field(1, ge=1, le=4)
    quant_table: int = Field(0, ge=0, le=3)


class FrameSegment(_Segment):
    kind: Literal["frame"] = "frame"
    marker: int
    precision: int = 8
    height: int = Field(ge=0)
    width: int = Field(ge=0)
    components: Tuple[ComponentSpec, ...]

    @property
    def num_components(self) -> int:
        return len(self.components)

    @property
    def progressive(self) -> bool:
        return self.marker in (0xC2, 0xC6, 0xCA, 0xCE)


class ScanSegment(_Segment):
    kind: Literal["scan"] = "scan"
    component_ids: Tuple[int, ...]


class AppSegment(_Segment):
    """APPn no reconocido (EXIF, ICC, XMP, ...)."""
    kind: Literal["app"] = "app"
    index: int = Field(ge=0, le=15)
    payload: bytes = b""

    @property
    def identifier(self) -> bytes:
        return self.payload.split(b"\x00", 1)[0]


class OpaqueSegment(_Segment):
    """DQT, DHT, DRI, COM, etc. Se conservan sin interpretar."""
    kind: Literal["opaque"] = "opaque"
    marker: int
    payload: bytes = b""


MarkerSegment = Annotated[
    Union[JfifSegment, AdobeSegment, FrameSegment, ScanSegment, AppSegment, OpaqueSegment],
    Field(discriminator="kind"),
]

# -------------------------
# Metadatos por imagen
# -------------------------
class JpegMetadata(BaseModel):
    """Secuencia ordenada de segmentos de marcador (hasta el primer SOS)."""
    model_config = ConfigDict(frozen=True)
    segments: Tuple[MarkerSegment, ...] = ()

    def _first(self, cls):
        for s in self.segments:
            if isinstance(s, cls):
                return s
        return None

    @property
    def adobe(self) -> Optional[AdobeSegment]:
        return self._first(AdobeSegment)

    @property
    def jfif(self) -> Optional[JfifSegment]:
        return self._first(JfifSegment)

    @property
    def frame(self) -> Optional[FrameSegment]:
        return self._first(FrameSegment)

    @property
    def num_components(self) -> Optional[int]:
        f = self.frame
        return f.num_components if f is not None else None

    def app_segments(self, index: int) -> Tuple[AppSegment, ...]:
        return tuple(s for s in self.segments if isinstance(s, AppSegment) and s.index == index)


__all__ = [
    "SOI", "EOI", "SOS", "TEM", "APP0", "APP14", "RST_MARKERS", "SOF_MARKERS",
    "JfifSegment", "AdobeSegment", "ComponentSpec", "FrameSegment", "ScanSegment",
    "AppSegment", "OpaqueSegment", "MarkerSegment", "JpegMetadata",
]
