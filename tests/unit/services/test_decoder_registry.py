import pytest
from dctnorm.contracts.errors import MissingDecoderCapabilityError
from dctnorm.services.decoder_registry import DecoderRegistry
from tests.factories import FakeDecoder

def test_select_skips_non_capable_providers():
    a = FakeDecoder(capable=False, name="a")
    b = FakeDecoder(name="b")
    c = FakeDecoder(name="c")
    reg = DecoderRegistry([a, b, c])
    assert reg.select() is b

def test_select_empty_registry_fails():
    with pytest.raises(MissingDecoderCapabilityError) as ei:
        DecoderRegistry().select(filter_index=3)
    assert ei.value.filter_index == 3

def test_select_no_capable_provider_fails():
    reg = DecoderRegistry([FakeDecoder(capable=False, name="x")])
    with pytest.raises(MissingDecoderCapabilityError, match="x"):
        reg.select()

def test_custom_predicate():
    reg = DecoderRegistry([FakeDecoder(name="a"), FakeDecoder(name="b")])
    assert reg.select(lambda d: d.name() == "b").name() == "b"

def test_register_order_and_first():
    reg = DecoderRegistry()
    reg.register(FakeDecoder(name="a"))
    reg.register(FakeDecoder(name="b"), first=True)
    assert reg.names() == ("b", "a")
    assert len(reg) == 2

def test_register_rejects_non_decoders():
    with pytest.raises(TypeError):
        DecoderRegistry().register(object())
