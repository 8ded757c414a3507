import sys
import argparse
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Optional

from vq_demo import VQ_SYMBOLS, quantize, format_report

__version__ = "1.0.0"

# Appended to every non-empty signature
TRAILER_URL = "https://github.com/alantmiller/arcana"
FIELD_SEPARATOR = " | "

# Symbol lines are wrapped at this width for email clients
LINE_WIDTH = 60

# Shortest block worth decoding (whitespace excluded)
MIN_ENCODED_LENGTH = 42

# Result reasons
TOO_SHORT = "TooShort"
ODD_HEX_LENGTH = "OddHexLength"
DECODE_FAILURE = "DecodeFailure"
NAME_TOO_SHORT = "NameTooShort"
INVALID_EMAIL = "InvalidEmail"

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

# Pasted text often starts with one; not whitespace to str.split()
BOM = "\ufeff"

# Verbose mode (disabled by default, enabled with --verbose)
VERBOSE = False

def log_info(msg: str):
    """Print info message only if verbose mode is enabled."""
    if VERBOSE:
        print(f"[INFO] {msg}", file=sys.stderr)

def log_warn(msg: str):
    """Print warning message only if verbose mode is enabled."""
    if VERBOSE:
        print(f"[WARN] {msg}", file=sys.stderr)

# ==========================================
#  ALPHABET: Hex Nibble <-> Glyph Table
# ==========================================

class SymbolAlphabet:
    """
    Fixed bijection between the 16 hex nibbles and geometric glyphs.

    Both tables are read-only views built once at import time:
    FORWARD maps '0'..'f' to a glyph, REVERSE maps each glyph back.
    """

    FORWARD = MappingProxyType({
        '0': '□', '1': '■', '2': '◇', '3': '◆',
        '4': '○', '5': '●', '6': '△', '7': '▲',
        '8': '▽', '9': '▼', 'a': '◻', 'b': '◼',
        'c': '◯', 'd': '★', 'e': '☆', 'f': '◎',
    })
    REVERSE = MappingProxyType({glyph: nibble for nibble, glyph in FORWARD.items()})

    @classmethod
    def to_symbols(cls, hex_digits: str) -> str:
        return "".join(cls.FORWARD[h] for h in hex_digits)

    @classmethod
    def to_hex(cls, text: str) -> str:
        """Keep only known glyphs, translated to nibbles. Anything else is dropped."""
        return "".join(cls.REVERSE[c] for c in text if c in cls.REVERSE)

# ==========================================
#  DATA: Inputs & Results
# ==========================================

@dataclass
class SignatureInput:
    name: str
    email: str
    company: str = ""
    website: str = ""

    def fields(self) -> List[str]:
        """Non-empty fields in signature order."""
        return [f for f in (self.name, self.company, self.email, self.website) if f]


@dataclass
class DecodeResult:
    ok: bool
    text: str = ""
    reason: Optional[str] = None
    detail: str = ""

    @classmethod
    def success(cls, text: str) -> "DecodeResult":
        return cls(ok=True, text=text)

    @classmethod
    def failure(cls, reason: str, detail: str) -> "DecodeResult":
        log_warn(f"Decode failed ({reason}): {detail}")
        return cls(ok=False, reason=reason, detail=detail)


@dataclass
class ValidationResult:
    ok: bool
    reason: Optional[str] = None
    detail: str = ""

# ==========================================
#  CODEC: Encode / Decode / Validate
# ==========================================

def wrap_symbols(symbols: str, width: int = LINE_WIDTH) -> str:
    return "\n".join(symbols[i:i + width] for i in range(0, len(symbols), width))


def generate_signature(sig: SignatureInput) -> str:
    """
    Encode a signature as a plaintext message line followed by a
    wrapped block of glyphs.

    The encoding process:
    1. Join the non-empty fields and the trailer URL with " | "
    2. Convert the message to UTF-8 bytes
    3. Each byte becomes two lowercase hex digits
    4. Each hex digit becomes one glyph, wrapped at LINE_WIDTH

    Returns "" when no field carries any content.
    """
    parts = sig.fields()
    if not parts:
        return ""

    parts.append(TRAILER_URL)
    message = FIELD_SEPARATOR.join(parts)

    data = message.encode('utf-8')
    hex_digits = "".join(f"{b:02x}" for b in data)
    wrapped = wrap_symbols(SymbolAlphabet.to_symbols(hex_digits))
    line_count = len(wrapped.splitlines())

    log_info(f"Encoded {len(data)} bytes as {len(hex_digits)} symbols on {line_count} line(s).")
    return f"{message}\n\n{wrapped}"


def extract_symbols(block: str) -> str:
    """Return the symbol lines of an encoded block, joined together."""
    # fields may contain blank lines, the symbol block never does
    _, sep, tail = block.rpartition("\n\n")
    if not sep:
        return block
    return "".join(tail.splitlines())


def decode_symbols(encoded_text: str) -> DecodeResult:
    """
    Decode a glyph block back to text.

    Whitespace and byte order marks are ignored and characters outside
    the alphabet are skipped, so a pasted block with line breaks or
    stray text still decodes.
    """
    clean_text = "".join(encoded_text.replace(BOM, "").split())

    if len(clean_text) < MIN_ENCODED_LENGTH:
        return DecodeResult.failure(
            TOO_SHORT, f"Encoded block must be at least {MIN_ENCODED_LENGTH} characters.")

    hex_digits = SymbolAlphabet.to_hex(clean_text)
    skipped = len(clean_text) - len(hex_digits)
    if skipped:
        log_info(f"Skipped {skipped} character(s) outside the symbol alphabet.")

    if len(hex_digits) % 2 != 0:
        return DecodeResult.failure(ODD_HEX_LENGTH, "Invalid encoding (odd hex length).")

    if not hex_digits:
        return DecodeResult.failure(DECODE_FAILURE, "Failed to decode.")

    data = bytes(int(hex_digits[i:i + 2], 16) for i in range(0, len(hex_digits), 2))

    try:
        text = data.decode('utf-8')
    except UnicodeDecodeError as e:
        log_info(f"UTF-8 error at byte {e.start}: {e.reason}")
        return DecodeResult.failure(DECODE_FAILURE, "Failed to decode.")

    log_info(f"Decoded {len(data)} bytes.")
    return DecodeResult.success(text)


def validate_input(sig: SignatureInput) -> ValidationResult:
    """Check name and email before a signature is saved or sent."""
    if len(sig.name) < 3:
        return ValidationResult(False, NAME_TOO_SHORT, "Name should be at least 3 characters.")

    if not EMAIL_PATTERN.fullmatch(sig.email):
        return ValidationResult(False, INVALID_EMAIL, "Please enter a valid email address.")

    return ValidationResult(True)

# ==========================================
#  CLI LOGIC
# ==========================================

def list_symbols():
    """Print both symbol alphabets."""
    print("\nSignature Alphabet:")
    print("=" * 40)
    for nibble, glyph in SymbolAlphabet.FORWARD.items():
        print(f"  {nibble}  ->  {glyph}")
    print("=" * 40)
    print("\nVQ Demo Alphabet:")
    print("  " + "  ".join(f"{i}:{s}" for i, s in enumerate(VQ_SYMBOLS)))


def read_source(args) -> str:
    if args.text is not None:
        return args.text
    if args.input:
        try:
            with open(args.input, "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            sys.exit(f"Error: File '{args.input}' not found.")
    if not sys.stdin.isatty():
        return sys.stdin.read()
    print("[ARCANA] Paste input below. Ctrl+D (Unix) or Ctrl+Z (Win) to end:", file=sys.stderr)
    try:
        return sys.stdin.read()
    except KeyboardInterrupt:
        sys.exit(0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="arcana",
        description=f"Arcana Signature Encoder v{__version__}",
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    action_group = parser.add_mutually_exclusive_group(required=True)
    action_group.add_argument("-e", "--encode", action="store_true", help="Encode signature fields")
    action_group.add_argument("-d", "--decode", action="store_true", help="Decode a symbol block")
    action_group.add_argument("-c", "--check", action="store_true", help="Validate name and email")
    action_group.add_argument("-q", "--quantize", action="store_true", help="Vector quantization demo")
    action_group.add_argument("-l", "--list", action="store_true", help="List the symbol alphabets")

    fields = parser.add_argument_group("signature fields")
    fields.add_argument("--name", default="", help="Your name")
    fields.add_argument("--email", default="", help="Your email address")
    fields.add_argument("--company", default="", help="Company (optional)")
    fields.add_argument("--website", default="", help="Website (optional)")

    parser.add_argument("--force", action="store_true",
                        help="Write the signature to --output even if validation fails")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable verbose output (info and warning messages)")

    io_group = parser.add_mutually_exclusive_group()
    io_group.add_argument("-t", "--text", help="Direct text input (decode / quantize)")
    io_group.add_argument("-i", "--input", help="Input file path (decode / quantize)")

    parser.add_argument("-o", "--output", help="Output file path")
    return parser


def main(argv: Optional[List[str]] = None):
    global VERBOSE

    parser = build_parser()
    args = parser.parse_args(argv)
    if (args.text is not None or args.input) and not (args.decode or args.quantize):
        parser.error("-t/--text and -i/--input only apply to --decode and --quantize")
    VERBOSE = args.verbose

    if args.list:
        list_symbols()
        return

    sig = SignatureInput(
        name=args.name.strip(),
        email=args.email.strip(),
        company=args.company.strip(),
        website=args.website.strip(),
    )

    if args.check:
        validation = validate_input(sig)
        if not validation.ok:
            sys.exit(f"Error: {validation.detail}")
        print("OK")
        return

    result = ""

    if args.encode:
        result = generate_signature(sig)
        if not result:
            print("Nothing to encode: provide at least one signature field.", file=sys.stderr)
            sys.exit(1)
        if args.output:
            validation = validate_input(sig)
            if not validation.ok:
                if not args.force:
                    sys.exit(f"Error: {validation.detail}")
                log_warn(f"Writing despite failed validation: {validation.detail}")

    elif args.decode:
        decoded = decode_symbols(read_source(args))
        if not decoded.ok:
            sys.exit(f"Error: {decoded.detail}")
        result = decoded.text

    else:
        vq = quantize(read_source(args).strip())
        if vq is None:
            sys.exit("Error: Nothing to quantize.")
        result = format_report(vq)

    if args.output:
        try:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(result)
                f.write("\n")
        except OSError as e:
            sys.exit(f"Error writing output: {e}")
        log_info(f"Wrote {args.output}")
    else:
        print(result)

if __name__ == "__main__":
    main()
