import heapq
from itertools import count


class HuffmanError(ValueError):
    """Base class for every error raised by the codec."""


class EmptyInputError(HuffmanError):
    """Compression was requested on zero-length input."""


class MalformedArtifactError(HuffmanError):
    """Artifact bytes cannot be parsed or declare inconsistent sizes."""


class CorruptDataError(HuffmanError):
    """Payload bits do not decompose into valid codes."""


class HuffmanNode: # Node for Huffman tree
    def __init__(self, symbol, frequency):
        self.symbol = symbol    # byte or None
        self.frequency = frequency
        self.left = None
        self.right = None

    def is_leaf(self):
        return self.symbol is not None

def build_frequency_table(data) -> dict: # data: bytes-like input
    table = {}
    for symbol in data:
        table[symbol] = table.get(symbol, 0) + 1 # dict keeps first-seen order, used as the tie-break
    return table

def build_huffman_tree(frequency_table): # frequency_table: dict of symbol -> frequency
    if not frequency_table:
        raise EmptyInputError("cannot build a Huffman tree from empty input")

    # (frequency, sequence, node): equal frequencies pop in insertion order,
    # merged nodes are sequenced after every node that already exists
    sequence = count()
    priority_queue = []
    for symbol, frequency in frequency_table.items():
        if frequency <= 0:
            raise ValueError(f"frequency for symbol {symbol!r} must be positive, got {frequency}")
        priority_queue.append((frequency, next(sequence), HuffmanNode(symbol, frequency)))
    heapq.heapify(priority_queue)

    # Build the tree
    while len(priority_queue) > 1:
        _, _, left = heapq.heappop(priority_queue)
        _, _, right = heapq.heappop(priority_queue)
        merged_node = HuffmanNode(None, left.frequency + right.frequency) # internal node with combined frequency
        merged_node.left = left
        merged_node.right = right
        heapq.heappush(priority_queue, (merged_node.frequency, next(sequence), merged_node))

    return priority_queue[0][2] # root of the tree

def generate_huffman_codes(root): # root: root of the Huffman tree
    codes = {}
    def generate_codes_helper(node, current_code): # recursive helper function to traverse the tree and generate codes
        if node is None:
            return

        # Leaf node -> assign code
        if node.is_leaf():
            codes[node.symbol] = current_code or "0" # lone leaf still needs one bit
            return

        generate_codes_helper(node.left, current_code + '0')
        generate_codes_helper(node.right, current_code + '1')

    generate_codes_helper(root, '')
    return codes # return the mapping of symbols to their corresponding Huffman codes

def code_lengths(code_map: dict) -> dict:
    return {symbol: len(code) for symbol, code in code_map.items()}

def canonical_codes(lengths: dict) -> dict:
    """
    Reassign codes canonically from code lengths alone.

    Symbols are ordered by (length, symbol); each code is the previous one plus
    one, shifted left whenever the length grows. Any set of lengths coming from
    a Huffman tree yields a prefix-free table, so only the lengths have to be
    stored to rebuild it.
    """
    codes = {}
    code = 0
    prev_len = 0
    for symbol in sorted(lengths, key=lambda s: (lengths[s], s)):
        length = lengths[symbol]
        code <<= (length - prev_len)
        codes[symbol] = format(code, f"0{length}b")
        code += 1
        prev_len = length
    return codes

def is_prefix_free(code_map: dict) -> bool:
    # after sorting, a code that prefixes another sits directly before some code it prefixes
    ordered = sorted(code_map.values())
    return all(not b.startswith(a) for a, b in zip(ordered, ordered[1:]))

def build_decoding_tree(code_map: dict) -> HuffmanNode: # rebuild an owned tree from a code table
    if not code_map:
        raise CorruptDataError("code table is empty")
    root = HuffmanNode(None, 0)
    for symbol, code in code_map.items():
        if not code:
            raise CorruptDataError(f"symbol {symbol!r} has an empty code")
        node = root
        for bit in code:
            if node.is_leaf():
                raise CorruptDataError(f"code for {symbol!r} extends another symbol's code")
            child = node.left if bit == '0' else node.right
            if child is None:
                child = HuffmanNode(None, 0)
                if bit == '0':
                    node.left = child
                else:
                    node.right = child
            node = child
        if node.is_leaf() or node.left is not None or node.right is not None:
            raise CorruptDataError(f"code for {symbol!r} collides with another code")
        node.symbol = symbol
    return root
