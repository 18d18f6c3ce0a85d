"""Zigzag encoding between signed and unsigned fixed-width integers.

Zigzag encoding interleaves signed values into the unsigned range by
magnitude, so that small negative numbers stay small once encoded:

    signed:    0  -1   1  -2   2  -3   3 ...
    unsigned:  0   1   2   3   4   5   6 ...

For a width of n bits the transforms are:

    encode(x) = (x << 1) ^ (x >> n - 1)
    decode(y) = (y >> 1) ^ -(y & 1)

Python integers have no width, so the left shift in encode is masked to n
bits. Python's right shift on int is arithmetic, which is exactly what encode
needs on the signed input. On the unsigned input of decode it behaves as a
logical shift.

Example:
    >>> I8.encode(-128)
    255
    >>> I8.decode(255)
    -128
    >>> zigzag_encode(-3, bits=32)
    5
"""
import functools
import logging
import operator
import struct

logger = logging.getLogger(__name__)

WORD_BITS = struct.calcsize('P') * 8


class ZigzagRangeError(ValueError):
    """Raised when a value does not fit the domain of a codec.

    Attributes:
        value: The rejected value
        bits: Width of the codec that rejected it
        signed: True if the value was given to encode (signed domain), False if given to decode
    """

    def __init__(self, value: int, bits: int, signed: bool):
        self.value = value
        self.bits = bits
        self.signed = signed
        kind = 'signed' if signed else 'unsigned'
        super().__init__(f"Value {value} does not fit in a {bits}-bit {kind} integer")


class ZigzagCodec:
    """Zigzag transform for one integer width.

    A codec is immutable and holds no state besides its width and the bounds derived
    from it, so instances can be shared freely between threads and tasks. Codecs with
    the same width compare equal.

    Inputs may be any object implementing __index__, e.g. numpy integer scalars.

    Example:
        codec = ZigzagCodec(16)
        codec.encode(-1)        # 1
        codec.decode(65535)     # -32768
    """

    __slots__ = ('_bits', '_mask', '_signed_min', '_signed_max')

    def __init__(self, bits: int):
        """Create a codec for the given width.

        Args:
            bits: Width of the signed and unsigned integers in bits

        Raises:
            ValueError: If bits is not a positive integer
        """
        _check_width(bits)

        self._bits = bits
        self._mask = (1 << bits) - 1
        self._signed_max = self._mask >> 1
        self._signed_min = -self._signed_max - 1

    @property
    def bits(self) -> int:
        return self._bits

    @property
    def signed_min(self) -> int:
        return self._signed_min

    @property
    def signed_max(self) -> int:
        return self._signed_max

    @property
    def unsigned_max(self) -> int:
        return self._mask

    def encode(self, value: int) -> int:
        """Map a signed integer to its zigzag-encoded unsigned counterpart.

        Args:
            value: Integer in [signed_min, signed_max]

        Returns:
            Integer in [0, unsigned_max]

        Raises:
            TypeError: If value is not an integer
            ZigzagRangeError: If value does not fit the signed domain
        """
        value = operator.index(value)
        if not self._signed_min <= value <= self._signed_max:
            raise ZigzagRangeError(value, self._bits, signed=True)

        # value >> (bits - 1) is 0 for non-negative values and -1 (all ones) otherwise
        return ((value << 1) ^ (value >> (self._bits - 1))) & self._mask

    def decode(self, value: int) -> int:
        """Map a zigzag-encoded unsigned integer back to its signed value.

        Args:
            value: Integer in [0, unsigned_max]

        Returns:
            Integer in [signed_min, signed_max]

        Raises:
            TypeError: If value is not an integer
            ZigzagRangeError: If value does not fit the unsigned domain
        """
        value = operator.index(value)
        if not 0 <= value <= self._mask:
            raise ZigzagRangeError(value, self._bits, signed=False)

        return (value >> 1) ^ -(value & 1)

    def __eq__(self, other):
        if not isinstance(other, ZigzagCodec):
            return NotImplemented
        return self._bits == other._bits

    def __hash__(self):
        return hash((ZigzagCodec, self._bits))

    def __repr__(self):
        return f"ZigzagCodec({self._bits})"


def _check_width(bits):
    if isinstance(bits, bool) or not isinstance(bits, int) or bits < 1:
        raise ValueError(f"Invalid integer width: {bits!r}")


I8 = ZigzagCodec(8)
I16 = ZigzagCodec(16)
I32 = ZigzagCodec(32)
I64 = ZigzagCodec(64)
I128 = ZigzagCodec(128)
ISIZE = ZigzagCodec(WORD_BITS)

STANDARD_WIDTHS = tuple(sorted({8, 16, 32, 64, 128, WORD_BITS}))

_STANDARD_CODECS = {codec.bits: codec for codec in (I8, I16, I32, I64, I128, ISIZE)}

# Upper bound on cached non-standard codecs
CODEC_CACHE_SIZE = 32


@functools.lru_cache(maxsize=CODEC_CACHE_SIZE)
def _build_codec(bits: int) -> ZigzagCodec:
    codec = ZigzagCodec(bits)
    logger.debug("Created zigzag codec for %d-bit integers", bits)
    return codec


def codec_for(bits: int) -> ZigzagCodec:
    """Return a codec for a width.

    Standard widths always return the shared module-level codecs (I8, I16, ...).
    Other widths are served from a bounded cache, so widths taken from external
    input cannot grow memory without limit.

    Args:
        bits: Width in bits

    Returns:
        Codec for the width

    Raises:
        ValueError: If bits is not a positive integer
    """
    _check_width(bits)
    codec = _STANDARD_CODECS.get(bits)
    if codec is None:
        codec = _build_codec(bits)
    return codec


def zigzag_encode(value: int, bits: int = 64) -> int:
    """Zigzag-encode a signed integer of the given width. See ZigzagCodec.encode."""
    return codec_for(bits).encode(value)


def zigzag_decode(value: int, bits: int = 64) -> int:
    """Zigzag-decode an unsigned integer of the given width. See ZigzagCodec.decode."""
    return codec_for(bits).decode(value)
