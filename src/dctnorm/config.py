# src/dctnorm/config.py
from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Tuple

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .contracts.core import TransformCode

# Proveedores JPEG conocidos por la composición (nombre → adapter)
KNOWN_DECODERS: Tuple[str, ...] = ("pillow",)
_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class Settings(BaseSettings):
    """
    Config del filtro DCT. No toca disco; variables DCTNORM_*.
    Debe ser construida y provista por composition/di.py.
    """
    model_config = SettingsConfigDict(
        env_prefix="DCTNORM_",
        env_nested_delimiter="__",
        extra="forbid",
        frozen=True,
    )

    # --- proveedores, en orden de selección ---
    # NoDecode: la variable de entorno es "a,b", no JSON
    decoder_order: Annotated[Tuple[str, ...], NoDecode] = ("pillow",)

    # --- política ante metadatos inconsistentes ---
    fallback_on_inconsistent_metadata: bool = True
    inconsistent_metadata_transform: TransformCode = TransformCode.YCCK

    # --- logging ---
    log_level: str = "WARNING"

    # ----------------------------
    # Normalizadores / validadores
    # ----------------------------
    @field_validator("decoder_order", mode="before")
    @classmethod
    def _split_names(cls, v):
        if isinstance(v, str):
            v = [x for x in v.split(",")]
        return tuple(str(x).strip().lower() for x in v)

    @field_validator("decoder_order")
    @classmethod
    def _known_decoders(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        unknown = [n for n in v if n not in KNOWN_DECODERS]
        if unknown:
            raise ValueError(f"decoder_order usa proveedores desconocidos: {unknown}")
        if len(set(v)) != len(v):
            raise ValueError("decoder_order tiene proveedores repetidos")
        return v

    @field_validator("inconsistent_metadata_transform", mode="before")
    @classmethod
    def _transform_by_name(cls, v):
        # acepta 2, "2" o "YCCK"
        if isinstance(v, str):
            s = v.strip().upper()
            return TransformCode[s] if s in TransformCode.__members__ else int(s)
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def _level_name(cls, v: str) -> str:
        v2 = str(v).strip().upper()
        if v2 not in _LEVELS:
            raise ValueError(f"log_level inválido: {v}")
        return v2

    # ----------------------------
    # Helpers puros (sin side-effects)
    # ----------------------------
    def metadata_policy(self):
        from .services.marker_interpreter import InconsistentMetadataPolicy
        return InconsistentMetadataPolicy(
            enabled=self.fallback_on_inconsistent_metadata,
            assume=self.inconsistent_metadata_transform,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Instancia cacheada. Úsala desde composition/di.py o como default de servicios.
    Para tests, recuerda limpiar:
        get_settings.cache_clear()
    """
    return Settings()
