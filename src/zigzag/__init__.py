from .codec import (
    ZigzagCodec,
    ZigzagRangeError,
    codec_for,
    zigzag_encode,
    zigzag_decode,
    I8,
    I16,
    I32,
    I64,
    I128,
    ISIZE,
    WORD_BITS,
    STANDARD_WIDTHS,
)
