from __future__ import annotations

from typing import Dict, Tuple, Union

from huffman import CorruptDataError, HuffmanNode


def encode_to_bitstring(data: bytes, code_map: Dict[int, str]) -> str: # data: input bytes to encode, code_map: dict of symbol -> Huffman code
    try:
        return ''.join(code_map[byte] for byte in data)
    except KeyError as exc:
        raise ValueError(f"symbol {exc.args[0]!r} has no code in the table") from None


def pack_bits_from_codes(data: bytes, code_map: Dict[int, str]) -> Tuple[bytes, int]:
    """
    Converts Huffman codes into packed bytes, most significant bit first
    Returns (packed_bytes, bit_length) where bit_length excludes the 0 bits
    used to pad the final byte
    """
    out = bytearray()
    acc = 0
    acc_bits = 0
    bit_length = 0

    for b in data:
        bits = code_map.get(b)
        if bits is None:
            raise ValueError(f"symbol {b!r} has no code in the table")
        bit_length += len(bits)
        for ch in bits:
            acc = (acc << 1) | (1 if ch == '1' else 0)
            acc_bits += 1
            if acc_bits == 8:
                out.append(acc & 0xFF)
                acc = 0
                acc_bits = 0

    if acc_bits != 0:
        acc = acc << (8 - acc_bits)
        out.append(acc & 0xFF)

    return bytes(out), bit_length


def padding_bits(bit_length: int) -> int:
    return -bit_length % 8


def _iter_bits(packed: bytes, bit_length: int):
    if bit_length < 0:
        raise CorruptDataError(f"negative bit length {bit_length}")
    if bit_length > len(packed) * 8:
        raise CorruptDataError(
            f"bit length {bit_length} exceeds payload capacity of {len(packed) * 8} bits"
        )
    bit_index = 0
    for byte in packed:
        for i in range(7, -1, -1):
            if bit_index >= bit_length:
                return
            yield (byte >> i) & 1
            bit_index += 1


def unpack_and_decode(packed: bytes, bit_length: int, root: HuffmanNode) -> bytes:
    """
    Decode packed bits by walking the Huffman tree
    """
    if root is None:
        raise CorruptDataError("no decoding tree")

    if root.is_leaf():
        # lone-leaf tree: every occurrence was written as a single 0 bit
        for bit in _iter_bits(packed, bit_length):
            if bit != 0:
                raise CorruptDataError("unexpected 1 bit for a single-symbol code")
        return bytes([root.symbol]) * bit_length

    decoded = bytearray()
    node = root
    for bit in _iter_bits(packed, bit_length):
        node = node.right if bit == 1 else node.left
        if node is None:
            raise CorruptDataError(f"bit pattern leaves the tree after {len(decoded)} symbols")

        # Leaf
        if node.is_leaf():
            decoded.append(node.symbol)
            node = root

    if node is not root:
        raise CorruptDataError("payload ends inside a code")
    return bytes(decoded)


def unpack_with_table(packed: bytes, bit_length: int, code_map: Dict[int, str]) -> bytes:
    """
    Decode packed bits by looking up progressively longer prefixes in the
    inverse code table
    """
    reverse_mapping = {code: symbol for symbol, code in code_map.items()}
    if len(reverse_mapping) != len(code_map):
        raise CorruptDataError("code table maps two symbols to the same code")
    max_len = max((len(code) for code in reverse_mapping), default=0)

    decoded = bytearray()
    current_code = ""
    for bit in _iter_bits(packed, bit_length):
        current_code += '1' if bit else '0'
        symbol = reverse_mapping.get(current_code)
        if symbol is not None:
            decoded.append(symbol)
            current_code = ""
        elif len(current_code) >= max_len:
            raise CorruptDataError(f"no code matches bits after {len(decoded)} symbols")

    if current_code:
        raise CorruptDataError("payload ends inside a code")
    return bytes(decoded)


def unpack(packed: bytes, bit_length: int, table_or_tree: Union[HuffmanNode, Dict[int, str]]) -> bytes:
    if isinstance(table_or_tree, HuffmanNode):
        return unpack_and_decode(packed, bit_length, table_or_tree)
    return unpack_with_table(packed, bit_length, table_or_tree)
