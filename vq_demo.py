"""
Vector Quantization Demo - character codes squeezed into 4 bins

An illustration only. It is not part of the signature encoding and does
not share the signature alphabet.

Each character's code point is scaled into [0, 1] by dividing by 255,
then dropped into one of four bins (0-3). Anything past 255 lands in
the top bin. Each bin has its own glyph:

    "test" -> [1, 1, 1, 1] -> "∆∆∆∆"
"""

import math
from dataclasses import dataclass
from typing import List, Optional

VQ_SYMBOLS = ('≈', '∆', '≋', '∇')
BIN_COUNT = len(VQ_SYMBOLS)

REPORT_WIDTH = 60


@dataclass
class VQResult:
    original: str
    indices: List[int]
    symbols: str


def quantize_char(c: str) -> int:
    """Bin index (0-3) for a single character."""
    value = ord(c) / 255
    return min(BIN_COUNT - 1, max(0, math.floor(value * BIN_COUNT)))


def quantize(text: str) -> Optional[VQResult]:
    if not text:
        return None

    indices = [quantize_char(c) for c in text]
    symbols = "".join(VQ_SYMBOLS[i] for i in indices)
    return VQResult(original=text, indices=indices, symbols=symbols)


def format_report(result: VQResult) -> str:
    wrapped = "\n".join(
        result.symbols[i:i + REPORT_WIDTH] for i in range(0, len(result.symbols), REPORT_WIDTH)
    )
    indices = ", ".join(str(i) for i in result.indices)
    return f"Original: {result.original}\nQuantized Indices: [{indices}]\nSymbols:\n{wrapped}"
