import pytest
from dctnorm.contracts.core import DecodeWarning, Outcome, TransformCode, WarningKind
from dctnorm.contracts.errors import DCTFilterError, InconsistentMetadataError, MalformedStreamError, DecodeError

def test_transform_code_values():
    assert [int(c) for c in TransformCode] == [0, 1, 2]
    assert TransformCode(2) is TransformCode.YCCK

def test_outcome_without_warnings_is_not_degraded():
    o = Outcome(42)
    assert o.value == 42 and not o.degraded and o.kinds() == ()

def test_outcome_merge_keeps_value_and_orders_warnings():
    w1 = DecodeWarning(kind=WarningKind.INCONSISTENT_METADATA, message="a")
    w2 = DecodeWarning(kind=WarningKind.UNSUPPORTED_TRANSFORM, message="b")
    o = Outcome("x", (w1,)).merge(Outcome("y", (w2,)))
    assert o.value == "x"
    assert o.kinds() == (WarningKind.INCONSISTENT_METADATA, WarningKind.UNSUPPORTED_TRANSFORM)

def test_warning_message_required():
    with pytest.raises(ValueError):
        DecodeWarning(kind=WarningKind.ENCODE_UNSUPPORTED, message="   ")

def test_warning_with_filter_index():
    w = DecodeWarning(kind=WarningKind.ENCODE_UNSUPPORTED, message="x").with_filter_index(3)
    assert w.filter_index == 3

def test_error_hierarchy_and_context():
    e = InconsistentMetadataError("roto", filter_index=2)
    assert isinstance(e, DecodeError) and isinstance(e, DCTFilterError)
    assert "filtro #2" in str(e)
    assert str(MalformedStreamError("x")) == "x"
