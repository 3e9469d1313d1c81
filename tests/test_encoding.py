import codecs

import pytest
from hypothesis import given, strategies as st

from azure_keysource.exceptions import DecodeError
from azure_keysource.utils.encoding import decode_bytes, detect_encoding

SAMPLE = '{"tenantId": "t", "clientId": "c"}'


@pytest.mark.parametrize(
    "payload, codec, skip",
    [
        (codecs.BOM_UTF16_LE + SAMPLE.encode("utf-16-le"), "utf-16-le", 2),
        (codecs.BOM_UTF16_BE + SAMPLE.encode("utf-16-be"), "utf-16-be", 2),
        (codecs.BOM_UTF8 + SAMPLE.encode("utf-8"), "utf-8", 3),
        (SAMPLE.encode("utf-16-le"), "utf-16-le", 0),
        (SAMPLE.encode("utf-16-be"), "utf-16-be", 0),
        (SAMPLE.encode("utf-8"), "utf-8", 0),
    ],
)
def test_detect_encoding(payload: bytes, codec: str, skip: int) -> None:
    assert detect_encoding(payload) == (codec, skip)
    assert decode_bytes(payload) == SAMPLE


def test_empty_input_is_utf8() -> None:
    assert detect_encoding(b"") == ("utf-8", 0)
    assert decode_bytes(b"") == ""


def test_non_ascii_utf8_is_not_mistaken_for_utf16() -> None:
    text = "clientSecret: pässwörd-ключ"
    assert decode_bytes(text.encode("utf-8")) == text


def test_truncated_utf16_raises() -> None:
    payload = codecs.BOM_UTF16_LE + SAMPLE.encode("utf-16-le")[:-1]
    with pytest.raises(DecodeError):
        decode_bytes(payload)


def test_unpaired_surrogate_raises() -> None:
    # High surrogate D800 followed by "a"
    payload = codecs.BOM_UTF16_BE + b"\xd8\x00\x00a"
    with pytest.raises(DecodeError):
        decode_bytes(payload)


def test_invalid_utf8_raises() -> None:
    with pytest.raises(DecodeError):
        decode_bytes(b"clientId: \xc3\x28")


@given(st.text(max_size=64))
def test_utf16_with_bom_matches_utf8(text: str) -> None:
    assert decode_bytes(codecs.BOM_UTF16_LE + text.encode("utf-16-le")) == text
    assert decode_bytes(codecs.BOM_UTF16_BE + text.encode("utf-16-be")) == text


@pytest.mark.parametrize("codec", ["utf-16-le", "utf-16-be"])
def test_bomless_utf16_with_non_latin_code_unit(codec: str) -> None:
    text = "clientSecret: Ā一 " + SAMPLE
    payload = text.encode(codec)
    assert detect_encoding(payload) == (codec, 0)
    assert decode_bytes(payload) == text
