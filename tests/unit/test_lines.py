import pytest

from sse_stream._errors import DecodeError
from sse_stream._lines import LineDecoder


def decode_all(chunks: list[bytes]) -> list[str]:
    decoder = LineDecoder()
    lines: list[str] = []
    for chunk in chunks:
        lines.extend(decoder.decode(chunk))
    lines.extend(decoder.flush())
    return lines


def test_splits_on_all_terminators():
    assert decode_all([b"a\nb\r\nc\rd\n"]) == ["a", "b", "c", "d"]


def test_partial_line_is_buffered_until_completed():
    decoder = LineDecoder()

    assert list(decoder.decode(b"data: hel")) == []
    assert list(decoder.decode(b"lo\nda")) == ["data: hello"]
    assert list(decoder.decode(b"ta: x\n")) == ["data: x"]


def test_crlf_split_across_chunks_is_a_single_terminator():
    decoder = LineDecoder()

    assert list(decoder.decode(b"a\r")) == []
    assert list(decoder.decode(b"\nb\n")) == ["a", "b"]


def test_trailing_cr_followed_by_other_bytes_is_bare_cr():
    decoder = LineDecoder()

    assert list(decoder.decode(b"a\r")) == []
    assert list(decoder.decode(b"b\n")) == ["a", "b"]


def test_held_cr_survives_empty_chunk():
    decoder = LineDecoder()

    assert list(decoder.decode(b"a\r")) == []
    assert list(decoder.decode(b"")) == []
    assert list(decoder.decode(b"\n")) == ["a"]


def test_blank_lines_are_emitted():
    assert decode_all([b"a\n\nb\r\n\r\n"]) == ["a", "", "b", ""]


def test_flush_emits_residual_line():
    assert decode_all([b"a\nrest"]) == ["a", "rest"]


def test_flush_resolves_trailing_cr_as_terminator():
    # El \r final termina la línea "a".
    assert decode_all([b"a\r"]) == ["a"]
    # Un \r suelto tras un terminador es una línea vacía.
    assert decode_all([b"a\n\r"]) == ["a", ""]


def test_flush_with_empty_buffer_emits_nothing():
    assert decode_all([b"a\n"]) == ["a"]
    assert decode_all([]) == []


def test_flushed_decoder_returns_no_more_lines():
    decoder = LineDecoder()
    list(decoder.decode(b"a"))

    assert list(decoder.flush()) == ["a"]
    assert decoder.closed
    assert list(decoder.flush()) == []
    assert list(decoder.decode(b"b\n")) == []


def test_multibyte_character_split_across_chunks():
    raw = "data: héllo €\n".encode("utf-8")
    # Cortar en medio del símbolo del euro (3 bytes).
    cut = raw.index("€".encode("utf-8")) + 1

    assert decode_all([raw[:cut], raw[cut:]]) == ["data: héllo €"]


def test_every_byte_split_gives_same_lines():
    raw = "event: ñ\r\ndata: 日本\r\rdata: x\n\n".encode("utf-8")
    expected = decode_all([raw])

    for i in range(len(raw) + 1):
        assert decode_all([raw[:i], raw[i:]]) == expected
    assert decode_all([raw[i:i + 1] for i in range(len(raw))]) == expected


def test_accepts_bytearray_and_memoryview():
    assert decode_all([bytearray(b"a\n"), memoryview(b"b\n")]) == ["a", "b"]


def test_leading_bom_is_dropped_once():
    bom = "\ufeff".encode("utf-8")

    assert decode_all([bom[:2], bom[2:] + b"data: a\n"]) == ["data: a"]
    assert decode_all([bom + b"a\n" + bom + b"b\n"]) == ["a", "\ufeffb"]


def test_invalid_utf8_raises_decode_error_after_valid_lines():
    decoder = LineDecoder()
    lines = decoder.decode(b"ok\n\xff\xfe\nnever\n")

    assert next(lines) == "ok"
    with pytest.raises(DecodeError) as exc:
        next(lines)

    assert exc.value.line == b"\xff\xfe"
    assert exc.value.reason
    assert isinstance(exc.value, ValueError)
    assert decoder.closed
    assert list(decoder.decode(b"more\n")) == []


def test_incomplete_utf8_at_end_of_stream_raises():
    decoder = LineDecoder()

    assert list(decoder.decode(b"data: \xe2\x82")) == []
    with pytest.raises(DecodeError):
        list(decoder.flush())
