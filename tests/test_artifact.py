import struct

import pytest

import artifact
from huffman import MalformedArtifactError

AAABBC_CODES = {ord('a'): "0", ord('b'): "10", ord('c'): "11"}
AAABBC_PAYLOAD = bytes([0b00010101, 0b10000000])


def _raw(entries, symbol_count, bit_length, payload, magic=artifact.MAGIC, version=artifact.VERSION, entry_count=None):
	if entry_count is None:
		entry_count = len(entries)
	out = artifact.HEADER.pack(magic, version, symbol_count, bit_length, entry_count)
	for symbol, length in entries:
		out += artifact.ENTRY.pack(symbol, length)
	return out + payload


def test_layout_for_aaabbc():
	blob = artifact.encode_artifact(AAABBC_CODES, 6, 9, AAABBC_PAYLOAD)
	assert blob[:4] == b"HUFZ"
	assert blob[4] == 1
	assert struct.unpack(">QQH", blob[5:23]) == (6, 9, 3)
	assert blob[23:29] == bytes([ord('a'), 1, ord('b'), 2, ord('c'), 2])
	assert blob[29:] == AAABBC_PAYLOAD


def test_decode_recovers_everything():
	blob = artifact.encode_artifact(AAABBC_CODES, 6, 9, AAABBC_PAYLOAD)
	parsed = artifact.decode_artifact(blob)
	assert parsed == artifact.Artifact(AAABBC_CODES, 6, 9, AAABBC_PAYLOAD)


def test_encode_rejects_non_canonical_table():
	with pytest.raises(ValueError):
		artifact.encode_artifact({ord('a'): "1", ord('b'): "00", ord('c'): "01"}, 6, 9, AAABBC_PAYLOAD)


def test_encode_rejects_payload_size_mismatch():
	with pytest.raises(ValueError):
		artifact.encode_artifact(AAABBC_CODES, 6, 9, AAABBC_PAYLOAD + b"\x00")


def test_payload_size():
	assert artifact.payload_size(1) == 1
	assert artifact.payload_size(8) == 1
	assert artifact.payload_size(9) == 2


@pytest.mark.parametrize("blob", [
	b"",
	b"HUFZ",
	_raw([(97, 1)], 1, 1, b"\x00", magic=b"ZIP!"),
	_raw([(97, 1)], 1, 1, b"\x00", version=2),
	_raw([(97, 1)], 0, 1, b"\x00"),
	_raw([(97, 1)], 1, 0, b""),
	_raw([], 1, 1, b"\x00"),
	_raw([(97, 1)], 1, 1, b"", entry_count=2),
	_raw([(97, 1), (97, 1)], 2, 2, b"\x00"),
	_raw([(97, 0)], 1, 1, b"\x00"),
	_raw([(97, 1), (98, 1), (99, 1)], 3, 3, b"\x00"),
	_raw([(97, 1)], 3, 3, b"\x00\x00"),
	_raw([(97, 1)], 3, 3, b""),
	_raw([(97, 1), (98, 2), (99, 2)], 2, 5, b"\x00"),
	_raw([(97, 1), (98, 2), (99, 2)], 3, 2, b"\x00"),
])
def test_malformed_artifacts(blob):
	with pytest.raises(MalformedArtifactError):
		artifact.decode_artifact(blob)


def test_truncated_payload():
	blob = artifact.encode_artifact(AAABBC_CODES, 6, 9, AAABBC_PAYLOAD)
	with pytest.raises(MalformedArtifactError):
		artifact.decode_artifact(blob[:-1])
