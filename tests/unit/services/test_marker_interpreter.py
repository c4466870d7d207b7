import logging
import pytest
from dctnorm.adapters.jpeg_markers import read_jpeg_metadata
from dctnorm.contracts.core import TransformCode, WarningKind
from dctnorm.contracts.errors import InconsistentMetadataError, MalformedStreamError
from dctnorm.services.marker_interpreter import InconsistentMetadataPolicy, read_adobe_transform
from tests.factories import FakeDecoder, jpeg_stream, make_metadata


class _MarkerOnlyDecoder(FakeDecoder):
    """Metadatos leídos del stream real por el lector de marcadores."""
    def image_metadata(self, data):
        self.metadata_calls += 1
        return read_jpeg_metadata(data)


def test_adobe_ycck_marker():
    dec = FakeDecoder(metadata=make_metadata(adobe_transform=2))
    o = read_adobe_transform(dec, b"")
    assert o.value is TransformCode.YCCK and not o.degraded

def test_missing_adobe_marker_is_unknown():
    dec = FakeDecoder(metadata=make_metadata(adobe_transform=None))
    o = read_adobe_transform(dec, b"")
    assert o.value is TransformCode.UNKNOWN and o.warnings == ()

def test_inconsistent_metadata_falls_back_to_ycck(caplog):
    dec = FakeDecoder(metadata_error=InconsistentMetadataError("Inconsistent metadata read from stream"))
    with caplog.at_level(logging.WARNING, logger="dctnorm"):
        o = read_adobe_transform(dec, b"", filter_index=4)
    assert o.value is TransformCode.YCCK
    assert o.kinds() == (WarningKind.INCONSISTENT_METADATA,)
    assert o.warnings[0].filter_index == 4
    assert "inconsistentes" in caplog.text

def test_fallback_target_is_overridable():
    dec = FakeDecoder(metadata_error=InconsistentMetadataError("x"))
    o = read_adobe_transform(dec, b"", InconsistentMetadataPolicy(assume=TransformCode.UNKNOWN))
    assert o.value is TransformCode.UNKNOWN and o.degraded

def test_disabled_policy_propagates_with_context():
    dec = FakeDecoder(metadata_error=InconsistentMetadataError("x"))
    with pytest.raises(InconsistentMetadataError) as ei:
        read_adobe_transform(dec, b"", InconsistentMetadataPolicy(enabled=False), filter_index=2)
    assert ei.value.filter_index == 2

def test_other_metadata_errors_propagate():
    dec = FakeDecoder(metadata_error=MalformedStreamError("truncado"))
    with pytest.raises(MalformedStreamError):
        read_adobe_transform(dec, b"")

@pytest.mark.parametrize("stream, expected, degraded", [
    (jpeg_stream(components=4, adobe=2), TransformCode.YCCK, False),
    (jpeg_stream(components=4, adobe=1), TransformCode.YCBCR, False),
    (jpeg_stream(components=4), TransformCode.UNKNOWN, False),
    (jpeg_stream(components=4, jfif=True), TransformCode.YCCK, True),
])
def test_with_marker_reader(stream, expected, degraded):
    o = read_adobe_transform(_MarkerOnlyDecoder(), stream)
    assert o.value is expected
    assert o.degraded is degraded
