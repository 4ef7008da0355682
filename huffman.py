import heapq
import itertools

### HUFFMAN NODE CLASS ###
class HuffmanNode:
    """Represents a node in the Huffman tree."""
    def __init__(self, byte=None, freq=0, left=None, right=None):
        # byte: The byte value (0-255). None for internal nodes.
        self.byte = byte
        # freq: The frequency of the byte or the combined frequency of its children.
        self.freq = freq
        self.left = left
        self.right = right

    @property
    def is_leaf(self):
        return self.left is None and self.right is None

    def __repr__(self):
        if self.is_leaf:
            return f"HuffmanNode(byte={self.byte!r}, freq={self.freq})"
        return f"HuffmanNode(freq={self.freq})"


def _as_bytes(data):
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


### FREQUENCY COUNTING ###
def calculate_frequency(data):
    """Counts each byte value in data. Keys come out in ascending byte order."""
    frequency = {}
    for byte_int in _as_bytes(data):
        frequency[byte_int] = frequency.get(byte_int, 0) + 1

    return {byte_int: frequency[byte_int] for byte_int in sorted(frequency)}


### TREE CONSTRUCTION ###
def build_huffman_tree(frequency):
    """
    Builds the Huffman tree from a frequency table and returns its root.

    Heap entries are (freq, sequence, node). Leaves get their sequence
    numbers in ascending byte order and merged nodes take the next number,
    so equal weights pop in insertion order.
    """
    sequence = itertools.count()
    priority_queue = []
    for byte_int in sorted(frequency):
        node = HuffmanNode(byte=byte_int, freq=frequency[byte_int])
        priority_queue.append((node.freq, next(sequence), node))
    heapq.heapify(priority_queue)

    if not priority_queue:
        return None

    if len(priority_queue) == 1:
        # A lone symbol hangs off the left of an internal root so its code is '0'
        _, _, leaf = heapq.heappop(priority_queue)
        return HuffmanNode(freq=leaf.freq, left=leaf)

    while len(priority_queue) > 1:
        _, _, left = heapq.heappop(priority_queue)
        _, _, right = heapq.heappop(priority_queue)

        merged = HuffmanNode(freq=left.freq + right.freq, left=left, right=right)
        heapq.heappush(priority_queue, (merged.freq, next(sequence), merged))

    return priority_queue[0][2]


### CODE GENERATION ###
def generate_codes(root):
    """Walks the tree depth-first and returns {byte: bit-string}."""
    huffman_codes = {}

    def generate_codes_recursive(node, current_code):
        if node is None:
            return
        if node.is_leaf:
            huffman_codes[node.byte] = current_code or "0"
            return

        generate_codes_recursive(node.left, current_code + "0")
        generate_codes_recursive(node.right, current_code + "1")

    generate_codes_recursive(root, "")
    return huffman_codes


### ENCODING / DECODING ###
def encode_bits(data, huffman_codes):
    """Concatenates the code of every byte. Bytes without a code are skipped."""
    if not data or not huffman_codes:
        return ""

    return "".join(huffman_codes[b] for b in _as_bytes(data) if b in huffman_codes)


def decode_bits(bits, root):
    """
    Walks the tree bit by bit and returns the decoded bytes.

    Malformed paths never raise: a step onto a missing child drops that bit
    and restarts from the root. Characters other than '0' and '1' are
    ignored, and an unfinished path at the end is discarded.
    """
    if root is None or not bits:
        return b""

    decoded = bytearray()
    current_node = root

    for bit in bits:
        if current_node is None:
            current_node = root
            continue

        if bit == "0":
            next_node = current_node.left
        elif bit == "1":
            next_node = current_node.right
        else:
            continue

        if next_node is None:
            # Invalid path, skip
            current_node = root
            continue

        current_node = next_node
        if current_node.is_leaf:
            decoded.append(current_node.byte)
            current_node = root

    return bytes(decoded)


### CODER STATE ###
class HuffmanCoder:
    """
    Holds the state of one encode/decode session: the frequency table,
    the tree, the code table and the text that was last encoded.

    A coder is not safe to share between threads; give each session its
    own instance or guard it with a lock.
    """
    def __init__(self):
        self.root = None
        self.huffman_codes = {}
        self.frequencies = {}
        self.last_encoded_text = b""

    def reset(self):
        self.root = None
        self.huffman_codes = {}
        self.frequencies = {}
        self.last_encoded_text = b""

    def calculate_frequencies(self, data):
        data = _as_bytes(data)
        self.last_encoded_text = data
        self.frequencies = calculate_frequency(data)
        return self.frequencies

    def build_tree(self):
        self.root = build_huffman_tree(self.frequencies)
        self.huffman_codes = generate_codes(self.root)
        return self.root

    def encode(self, data):
        return encode_bits(data, self.huffman_codes)

    def decode(self, bits):
        return decode_bits(bits, self.root)

    def compress(self, data):
        """Rebuilds all state from data and returns its encoded bits."""
        self.reset()
        self.calculate_frequencies(data)
        self.build_tree()
        return self.encode(data)

    def matches_original(self, decoded):
        return _as_bytes(decoded) == self.last_encoded_text

    ### STATISTICS ###
    def get_original_bits(self, data):
        return len(_as_bytes(data)) * 8

    def get_encoded_bits(self, encoded):
        return len(encoded)

    def get_compression_ratio(self, data, encoded):
        original = self.get_original_bits(data)
        if original == 0:
            return 0
        compressed = self.get_encoded_bits(encoded)
        return (original - compressed) / original * 100

    def get_unique_chars(self):
        return len(self.frequencies)
