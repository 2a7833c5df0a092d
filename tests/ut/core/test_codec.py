import pytest

from peernet.core.codec import MessageCodec
from peernet.core.errors import CodecError
from peernet.infra.msgpack_serializer import MsgPackSerializer


@pytest.fixture
def codec(serializer):
    return MessageCodec(serializer)


@pytest.mark.ut
def test_decode_restores_event_and_args(codec):
    payload = codec.encode("update", 1, "two", [3], {"four": 4}, None)

    assert codec.decode(payload) == ("update", [1, "two", [3], {"four": 4}, None])


@pytest.mark.ut
def test_event_without_args(codec):
    assert codec.decode(codec.encode("ping")) == ("ping", [])


@pytest.mark.ut
def test_msgpack_codec_keeps_bytes_args():
    codec = MessageCodec(MsgPackSerializer())

    assert codec.decode(codec.encode("blob", b"\x00\x01", 2)) == ("blob", [b"\x00\x01", 2])


@pytest.mark.ut
def test_encode_rejects_non_string_event(codec):
    with pytest.raises(CodecError):
        codec.encode(42)


@pytest.mark.ut
def test_encode_wraps_serializer_errors(codec):
    with pytest.raises(CodecError) as info:
        codec.encode("ping", object())

    assert isinstance(info.value.__cause__, TypeError)


@pytest.mark.ut
@pytest.mark.parametrize("raw", [b"{}", b"[]", b"[1, 2]", b"\"ping\""])
def test_decode_rejects_non_event_payloads(codec, raw):
    with pytest.raises(CodecError):
        codec.decode(raw)


@pytest.mark.ut
def test_decode_wraps_serializer_errors(codec):
    with pytest.raises(CodecError):
        codec.decode(b"\xff\xfe")
