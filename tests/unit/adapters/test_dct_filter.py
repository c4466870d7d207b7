import io
import logging
import pytest
from dctnorm.adapters.dct_filter import DCTFilter
from dctnorm.config import Settings
from dctnorm.contracts.core import WarningKind
from dctnorm.contracts.errors import MalformedStreamError, MissingDecoderCapabilityError
from dctnorm.services.dct_decode_service import DCTDecodeService
from dctnorm.services.decoder_registry import DecoderRegistry
from tests.factories import FakeDecoder, make_metadata, make_raster

def _filter(*decoders):
    return DCTFilter(service=DCTDecodeService(registry=DecoderRegistry(list(decoders)), settings=Settings()))

@pytest.mark.parametrize("bands", [1, 3, 4])
def test_decode_writes_packed_raster(bands):
    r = make_raster(w=5, h=3, bands=bands)
    f = _filter(FakeDecoder(raster=r, metadata=make_metadata(adobe_transform=2)))
    sink = io.BytesIO()
    res = f.decode(io.BytesIO(b"\xFF\xD8..."), sink, {"ColorTransform": 1})
    assert len(sink.getvalue()) == 5 * 3 * bands
    assert sink.getvalue() == res.payload

def test_no_decoder_writes_nothing():
    sink = io.BytesIO()
    with pytest.raises(MissingDecoderCapabilityError):
        _filter().decode(io.BytesIO(b"\xFF\xD8"), sink, filter_index=3)
    assert sink.getvalue() == b""

def test_decoder_failure_writes_nothing():
    sink = io.BytesIO()
    with pytest.raises(MalformedStreamError):
        _filter(FakeDecoder(read_error=MalformedStreamError("basura"))).decode(io.BytesIO(b"junk"), sink)
    assert sink.getvalue() == b""

def test_encode_writes_nothing_and_warns_once(caplog):
    src, sink = io.BytesIO(b"raw pixels"), io.BytesIO()
    with caplog.at_level(logging.WARNING, logger="dctnorm"):
        out = _filter(FakeDecoder()).encode(src, sink, filter_index=1)
    assert sink.getvalue() == b""
    assert src.tell() == 0
    assert out.kinds() == (WarningKind.ENCODE_UNSUPPORTED,)
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 1
