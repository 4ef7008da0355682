# -----------------------------------------------------------
# JSON VIEWS OF THE HUFFMAN CODER STATE
# -----------------------------------------------------------

# Two-character escapes for the common control bytes
NAMED_ESCAPES = {
    0x0A: "\\n",
    0x09: "\\t",
    0x0D: "\\r",
    0x08: "\\b",
    0x0C: "\\f",
    0x5C: "\\\\",
    0x22: '\\"',
}
SPACE_TOKEN = "[space]"

_NAMED_LOOKUP = {token: byte_int for byte_int, token in NAMED_ESCAPES.items()}


def escape_symbol(byte_int):
    """Returns the printable rendering of one byte value."""
    if not 0 <= byte_int <= 255:
        raise ValueError(f"Not a byte value: {byte_int!r}")

    if byte_int == 0x20:
        return SPACE_TOKEN
    if byte_int in NAMED_ESCAPES:
        return NAMED_ESCAPES[byte_int]
    if byte_int < 0x20:
        return f"\\u{byte_int:04x}"
    if byte_int >= 0x7F:
        return f"\\x{byte_int:02x}"
    return chr(byte_int)


def unescape_symbol(token):
    """Inverse of escape_symbol. Raises ValueError on anything non-canonical."""
    if token == SPACE_TOKEN:
        return 0x20
    if token in _NAMED_LOOKUP:
        return _NAMED_LOOKUP[token]

    if len(token) == 1:
        byte_int = ord(token)
        if 0x21 <= byte_int <= 0x7E and byte_int not in NAMED_ESCAPES:
            return byte_int
    elif len(token) == 6 and token.startswith("\\u"):
        byte_int = _parse_hex(token[2:])
        if byte_int is not None and byte_int < 0x20 and byte_int not in NAMED_ESCAPES:
            return byte_int
    elif len(token) == 4 and token.startswith("\\x"):
        byte_int = _parse_hex(token[2:])
        if byte_int is not None and byte_int >= 0x7F:
            return byte_int

    raise ValueError(f"Not an escaped symbol: {token!r}")


def _parse_hex(digits):
    if not digits or any(c not in "0123456789abcdef" for c in digits):
        return None
    return int(digits, 16)


# -----------------------------------------------------------
# VIEWS
# -----------------------------------------------------------
def frequencies_view(frequencies):
    return {escape_symbol(b): frequencies[b] for b in sorted(frequencies)}


def codes_view(huffman_codes):
    return {escape_symbol(b): huffman_codes[b] for b in sorted(huffman_codes)}


def tree_view(node):
    """Nested dicts for the tree; None stands for a missing child."""
    if node is None:
        return None
    if node.is_leaf:
        return {"freq": node.freq, "char": escape_symbol(node.byte)}
    return {
        "freq": node.freq,
        "left": tree_view(node.left),
        "right": tree_view(node.right),
    }


def stats_view(coder, data, encoded):
    return {
        "originalBits": coder.get_original_bits(data),
        "encodedBits": coder.get_encoded_bits(encoded),
        "compressionRatio": round(coder.get_compression_ratio(data, encoded), 2),
        "uniqueChars": coder.get_unique_chars(),
    }


def encode_document(coder, data, encoded):
    return {
        "encoded": encoded,
        "frequencies": frequencies_view(coder.frequencies),
        "codes": codes_view(coder.huffman_codes),
        "tree": tree_view(coder.root),
        "stats": stats_view(coder, data, encoded),
    }


def decode_document(coder, decoded):
    """'decoded' is for display; 'symbols' carries every byte losslessly."""
    return {
        "decoded": decoded.decode("utf-8", errors="replace"),
        "symbols": [escape_symbol(b) for b in decoded],
        "length": len(decoded),
        "match": coder.matches_original(decoded),
    }
