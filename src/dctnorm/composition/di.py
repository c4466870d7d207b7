from __future__ import annotations
from pathlib import Path
from typing import Callable, Dict, Optional
import logging
import yaml

from ..config import Settings, get_settings
from ..adapters.dct_filter import DCTFilter
from ..adapters.pillow_jpeg_decoder import PillowJpegDecoder
from ..ports.decoder import JpegDecoderPort
from ..services.dct_decode_service import DCTDecodeService
from ..services.decoder_registry import DecoderRegistry

# Factories simples (nombre en Settings.decoder_order → proveedor)
DECODER_FACTORIES: Dict[str, Callable[[], JpegDecoderPort]] = {
    "pillow": PillowJpegDecoder,
}

def load_settings_from_yaml(path: Path) -> Settings:
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    return Settings(**data)

def build_decoder_registry(settings: Settings) -> DecoderRegistry:
    reg = DecoderRegistry()
    for name in settings.decoder_order:
        reg.register(DECODER_FACTORIES[name]())
    return reg

def configure_logging(settings: Settings) -> logging.Logger:
    log = logging.getLogger("dctnorm")
    log.setLevel(settings.log_level)
    return log

def build_dct_filter(settings: Optional[Settings] = None) -> DCTFilter:
    st = settings or get_settings()
    configure_logging(st)
    service = DCTDecodeService(registry=build_decoder_registry(st), settings=st)
    return DCTFilter(service=service)
