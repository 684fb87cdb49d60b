"""Streaming processor and the stream-level encode/decode operations."""

from __future__ import annotations

import io

import pytest

import caesar


class _FailingReader(io.RawIOBase):
    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:  # type: ignore[override]
        raise OSError("disk on fire")


class _FailingWriter(io.RawIOBase):
    def writable(self) -> bool:
        return True

    def write(self, data) -> int:  # type: ignore[override]
        raise OSError("no space left")


def _run(codec: caesar.Cryptographer, data: bytes, *, decode: bool = False) -> bytes:
    out = io.BytesIO()
    if decode:
        caesar.decode_with_key(codec, io.BytesIO(data), out)
    else:
        caesar.encode(codec, io.BytesIO(data), out)
    return out.getvalue()


def test_empty_input_gives_empty_output() -> None:
    codec = caesar.new_codec(5)
    assert _run(codec, b"") == b""
    assert _run(codec, b"", decode=True) == b""


def test_only_foreign_scalars_become_skips() -> None:
    data = "abc123\n€".encode("utf-8")
    assert _run(caesar.new_codec(9), data) == b"~" * 8


def test_stream_round_trip(prose: str) -> None:
    for key in (1, 7, 40, 74):
        codec = caesar.new_codec(key)
        cipher = _run(codec, prose.encode("utf-8"))
        assert cipher != prose.encode("utf-8")
        assert _run(codec, cipher, decode=True) == prose.encode("utf-8")


def test_ciphertext_closed_over_alphabet_and_skip(prose: str) -> None:
    cipher = _run(caesar.new_codec(11), (prose + "\nLatin 42").encode("utf-8"))
    allowed = set(caesar.ALPHABET) | {caesar.SKIP_CHAR}
    assert set(cipher.decode("utf-8")) <= allowed


def test_multibyte_runes_split_across_chunks(monkeypatch: pytest.MonkeyPatch, prose: str) -> None:
    monkeypatch.setattr(caesar, "CHUNK_SIZE", 1)
    data = prose.encode("utf-8")
    cipher = _run(caesar.new_codec(3), data)
    monkeypatch.setattr(caesar, "CHUNK_SIZE", 7)
    assert _run(caesar.new_codec(3), cipher, decode=True) == data


def test_invalid_utf8_is_io_error() -> None:
    with pytest.raises(caesar.CodecIOError):
        _run(caesar.new_codec(1), b"\xd0\x9f\xff\xfe")


def test_truncated_trailing_rune_is_io_error() -> None:
    with pytest.raises(caesar.CodecIOError):
        _run(caesar.new_codec(1), "При".encode("utf-8")[:-1])


def test_read_failure_is_io_error() -> None:
    with pytest.raises(caesar.CodecIOError) as excinfo:
        caesar.new_codec(2).encode(io.BufferedReader(_FailingReader()), io.BytesIO())
    assert isinstance(excinfo.value.__cause__, OSError)


def test_write_failure_is_io_error() -> None:
    with pytest.raises(caesar.CodecIOError):
        caesar.new_codec(2).encode(io.BytesIO("да".encode("utf-8")), _FailingWriter())


def test_streams_are_left_open() -> None:
    src, dst = io.BytesIO("да".encode("utf-8")), io.BytesIO()
    caesar.new_codec(2).encode(src, dst)
    assert not src.closed
    assert not dst.closed


def test_encode_writes_to_real_files(tmp_path, prose: str) -> None:
    plain = tmp_path / "plain.txt"
    plain.write_text(prose, encoding="utf-8")
    enc = tmp_path / "enc.txt"
    dec = tmp_path / "dec.txt"

    codec = caesar.new_codec(21)
    with open(plain, "rb") as fin, open(enc, "wb") as fout:
        codec.encode(fin, fout)
    with open(enc, "rb") as fin, open(dec, "wb") as fout:
        codec.decode(fin, fout)

    assert dec.read_text(encoding="utf-8") == prose
