# src/dctnorm/contracts/core.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Generic, Optional, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator

T = TypeVar("T")

# -------------------------
# Códigos de transformación (Adobe APP14)
# -------------------------
class TransformCode(IntEnum):
    """Valor `transform` del marcador Adobe APP14."""
    UNKNOWN = 0   # RGB o CMYK, sin transformación
    YCBCR = 1
    YCCK = 2

# -------------------------
# Avisos recuperables
# -------------------------
class WarningKind(str, Enum):
    INCONSISTENT_METADATA = "inconsistent_metadata"
    UNSUPPORTED_TRANSFORM = "unsupported_transform"
    ENCODE_UNSUPPORTED = "encode_unsupported"

class DecodeWarning(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: WarningKind
    message: str
    filter_index: Optional[int] = None

    @field_validator("message")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("message no puede ser vacío")
        return v2

    def with_filter_index(self, filter_index: Optional[int]) -> "DecodeWarning":
        return self.model_copy(update={"filter_index": filter_index})

# -------------------------
# Resultado con avisos
# -------------------------
@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Valor + avisos recuperables acumulados.
    Un paso que se degrada (warn-and-continue) devuelve el valor de respaldo
    y el aviso; nunca lanza.
    """
    value: T
    warnings: Tuple[DecodeWarning, ...] = ()

    @property
    def degraded(self) -> bool:
        return bool(self.warnings)

    def kinds(self) -> Tuple[WarningKind, ...]:
        return tuple(w.kind for w in self.warnings)

    def merge(self, *others: "Outcome[object]") -> "Outcome[T]":
        """Conserva el valor propio y concatena los avisos en orden."""
        ws = list(self.warnings)
        for o in others:
            ws.extend(o.warnings)
        return Outcome(self.value, tuple(ws))


__all__ = ["TransformCode", "WarningKind", "DecodeWarning", "Outcome"]
