import pytest

import huffman
from huffman import EmptyInputError, CorruptDataError


def test_frequency_table_counts_and_keeps_first_seen_order():
	ft = huffman.build_frequency_table(b"aaabbc")
	assert ft == {ord('a'): 3, ord('b'): 2, ord('c'): 1}
	assert list(ft) == [ord('a'), ord('b'), ord('c')]
	assert sum(ft.values()) == 6


def test_frequency_table_empty_input():
	assert huffman.build_frequency_table(b"") == {}


def test_build_tree_rejects_empty_table():
	with pytest.raises(EmptyInputError):
		huffman.build_huffman_tree({})


def test_build_tree_rejects_non_positive_weight():
	with pytest.raises(ValueError):
		huffman.build_huffman_tree({1: 3, 2: 0})


def test_tree_shape_for_aaabbc():
	root = huffman.build_huffman_tree(huffman.build_frequency_table(b"aaabbc"))
	assert root.frequency == 6
	assert root.left.symbol == ord('a')
	# the two lightest nodes merge first, lighter one on the left
	assert root.right.left.symbol == ord('c')
	assert root.right.right.symbol == ord('b')


def test_leaf_and_internal_counts():
	ft = huffman.build_frequency_table(b"the quick brown fox jumps over the lazy dog")
	root = huffman.build_huffman_tree(ft)

	leaves, internal = [], []
	def walk(node):
		if node.is_leaf():
			leaves.append(node)
			return
		assert node.frequency == node.left.frequency + node.right.frequency
		internal.append(node)
		walk(node.left)
		walk(node.right)
	walk(root)

	assert len(leaves) == len(ft)
	assert len(internal) == len(ft) - 1


def test_ties_break_by_first_seen_symbol():
	# all weights equal: the first two symbols seen merge first
	root = huffman.build_huffman_tree({ord('x'): 1, ord('y'): 1, ord('z'): 1, ord('w'): 1})
	codes = huffman.generate_huffman_codes(root)
	assert codes == {ord('x'): "00", ord('y'): "01", ord('z'): "10", ord('w'): "11"}


def test_tree_build_is_deterministic():
	ft = huffman.build_frequency_table(b"mississippi river banks")
	a = huffman.generate_huffman_codes(huffman.build_huffman_tree(ft))
	b = huffman.generate_huffman_codes(huffman.build_huffman_tree(dict(ft)))
	assert a == b


def test_codes_for_aaabbc():
	root = huffman.build_huffman_tree(huffman.build_frequency_table(b"aaabbc"))
	codes = huffman.generate_huffman_codes(root)
	assert codes == {ord('a'): "0", ord('c'): "10", ord('b'): "11"}


def test_single_symbol_gets_one_bit_code():
	root = huffman.build_huffman_tree({ord('z'): 7})
	assert root.is_leaf()
	assert huffman.generate_huffman_codes(root) == {ord('z'): "0"}


def test_zero_byte_is_a_symbol():
	root = huffman.build_huffman_tree(huffman.build_frequency_table(b"\x00\x00\x01"))
	codes = huffman.generate_huffman_codes(root)
	assert set(codes) == {0, 1}


@pytest.mark.parametrize("data", [
	b"aaabbc",
	bytes(range(256)),
	b"abracadabra" * 7,
	bytes([0, 1, 1, 2, 2, 2, 3, 3, 3, 3, 4, 4, 4, 4, 4, 5, 5, 5, 5, 5, 5, 5, 5]),
])
def test_codes_are_prefix_free(data):
	codes = huffman.generate_huffman_codes(huffman.build_huffman_tree(huffman.build_frequency_table(data)))
	assert huffman.is_prefix_free(codes)
	assert huffman.is_prefix_free(huffman.canonical_codes(huffman.code_lengths(codes)))


def test_is_prefix_free_detects_prefix():
	assert not huffman.is_prefix_free({1: "0", 2: "01", 3: "11"})
	assert huffman.is_prefix_free({1: "0", 2: "10", 3: "11"})


def test_canonical_codes_from_lengths():
	codes = huffman.canonical_codes({ord('c'): 2, ord('a'): 1, ord('b'): 2})
	assert codes == {ord('a'): "0", ord('b'): "10", ord('c'): "11"}


def test_canonical_codes_keep_lengths():
	ft = huffman.build_frequency_table(b"she sells sea shells by the sea shore")
	codes = huffman.generate_huffman_codes(huffman.build_huffman_tree(ft))
	lengths = huffman.code_lengths(codes)
	assert huffman.code_lengths(huffman.canonical_codes(lengths)) == lengths


def test_decoding_tree_from_table():
	root = huffman.build_decoding_tree({ord('a'): "0", ord('b'): "10", ord('c'): "11"})
	assert root.left.symbol == ord('a')
	assert root.right.left.symbol == ord('b')
	assert root.right.right.symbol == ord('c')


@pytest.mark.parametrize("table", [
	{},
	{1: ""},
	{1: "0", 2: "01"},
	{1: "01", 2: "0"},
	{1: "10", 2: "10"},
])
def test_decoding_tree_rejects_bad_tables(table):
	with pytest.raises(CorruptDataError):
		huffman.build_decoding_tree(table)


def test_error_hierarchy():
	for cls in (huffman.EmptyInputError, huffman.MalformedArtifactError, huffman.CorruptDataError):
		assert issubclass(cls, huffman.HuffmanError)
		assert issubclass(cls, ValueError)
