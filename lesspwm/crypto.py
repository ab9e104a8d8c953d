"""
LessPWM - Cryptography Module

This single file contains ALL of the derivation logic:
- Configuration constants
- Character alphabets
- Entropy derivation (PBKDF2-HMAC-SHA256)
- Password derivation (positional encoding of the entropy)

Derivation Architecture:
    1. site + login + hex(counter) → salt
    2. Master password + salt → PBKDF2 (100,000 rounds) → 32 bytes
    3. 32 bytes → big-endian 256-bit integer (the "entropy")
    4. Entropy → repeated divmod against alphabets → password

Why this works without storage:
    - Same inputs always give the same 32 bytes
    - Every character is picked by a remainder, so the whole password is
      a function of the entropy value and nothing else
    - Changing the counter changes the salt, giving a fresh password for
      the same site/login pair
"""

import logging

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

ENTROPY_SIZE = 32        # 256-bit derived key
KDF_ITERATIONS = 100000  # PBKDF2 rounds (fixed, part of the output format)

DEFAULT_LENGTH = 16
DEFAULT_COUNTER = 1

MIN_LENGTH = 4           # one slot per character class
MAX_LENGTH = 255
MAX_COUNTER = 2**64 - 1


# =============================================================================
# Alphabets
# =============================================================================

LOWERCASE_CHARS = "abcdefghijklmnopqrstuvwxyz"
UPPERCASE_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
DIGITS = "0123456789"
SYMBOLS = "!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~"

# Index == policy bit. Order defines remainder → character mapping.
PASSWORD_CHARS = (LOWERCASE_CHARS, UPPERCASE_CHARS, DIGITS, SYMBOLS)
CLASS_NAMES = ("lowercase", "uppercase", "digits", "symbols")
ALL_CLASSES = 0b1111


class ContractViolation(ValueError):
    """Raised when a caller asks for a derivation that cannot be honoured."""


# =============================================================================
# Entropy
# =============================================================================

class Entropy:
    """
    A 256-bit unsigned integer used as a depletable source of randomness.

    Every call to take() divides the value, keeps the quotient and hands
    back the remainder. The value only ever shrinks, so two draws never
    see the same bits.

    Python ints are arbitrary precision, so the arithmetic is exact over
    the full 256 bits (no floats, no 64-bit truncation).

    An Entropy belongs to exactly one derivation call. Do not reuse it.
    """

    BITS = ENTROPY_SIZE * 8

    def __init__(self, value: int):
        if value < 0 or value >> self.BITS:
            raise ValueError(f"entropy must fit in {self.BITS} unsigned bits")
        self._value = value

    @classmethod
    def from_bytes(cls, data: bytes) -> "Entropy":
        """Interpret raw KDF output as a big-endian integer."""
        return cls(int.from_bytes(data, "big"))

    @property
    def value(self) -> int:
        return self._value

    def take(self, divisor: int) -> int:
        """
        Consume one draw: return value % divisor, keep value // divisor.

        Args:
            divisor: Size of the alphabet (or position range) to pick from

        Returns:
            Remainder in range [0, divisor)
        """
        if divisor <= 0:
            raise ValueError(f"divisor must be positive, got {divisor}")
        self._value, remainder = divmod(self._value, divisor)
        return remainder

    def __repr__(self):
        # Never print the value itself
        return f"<Entropy {self._value.bit_length()} bits left>"


# =============================================================================
# Entropy Derivation
# =============================================================================

def build_salt(site: str, login: str, counter: int) -> bytes:
    """
    Build the per-identity KDF salt.

    Format: site + login + counter as lowercase hex, no prefix, no padding.
        ("example.org", "me", 255) → b"example.orgmeff"

    Undecodable argv bytes (lone surrogates) go back to their raw bytes.
    """
    return f"{site}{login}{counter:x}".encode("utf-8", "surrogateescape")


def derive_entropy(site: str, login: str, counter: int, master_password) -> Entropy:
    """
    Stretch the master password into 256 bits of entropy using PBKDF2.

    Why PBKDF2-HMAC-SHA256 with a fixed 100,000 rounds?
    - It's the algorithm existing passwords were generated with
    - Changing any parameter silently changes every derived password

    Args:
        site: Site identifier (e.g. "example.org")
        login: Account name on that site
        counter: Non-negative integer, bumped to rotate a site password
        master_password: User's secret (str is UTF-8 encoded, bytes used as-is)

    Returns:
        Entropy holding the 32 derived bytes as a big-endian integer
    """
    if isinstance(master_password, str):
        master_password = master_password.encode("utf-8", "surrogateescape")

    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=ENTROPY_SIZE,
        salt=build_salt(site, login, counter),
        iterations=KDF_ITERATIONS,
    )
    logger.debug("PBKDF2-HMAC-SHA256: %d iterations, %d-byte output",
                 KDF_ITERATIONS, ENTROPY_SIZE)
    return Entropy.from_bytes(kdf.derive(master_password))


# =============================================================================
# Password Derivation
# =============================================================================

def count_classes(rule: int) -> int:
    """Number of enabled character classes in a rule mask."""
    return bin(rule & ALL_CLASSES).count("1")


def candidate_chars(rule: int) -> str:
    """Concatenate the enabled alphabets in bit order 0 → 3."""
    return "".join(
        chars for bit, chars in enumerate(PASSWORD_CHARS) if rule & (1 << bit)
    )


def derive_password(entropy: Entropy, rule: int, max_len: int) -> str:
    """
    Encode entropy as a password that satisfies the character rule.

    How it works:
    1. Fill max_len - (enabled classes) slots from the combined alphabet
    2. Pick one character from each enabled class (guarantees coverage)
    3. Insert those characters at entropy-chosen positions

    Every step draws from the same Entropy, in this exact order. Any change
    in order or alphabet layout produces a different (but valid-looking)
    password, so treat the sequence as a file format.

    Args:
        entropy: Fresh Entropy from derive_entropy() (consumed here)
        rule: 4-bit class mask (bit 0 lowercase ... bit 3 symbols)
        max_len: Output length, MIN_LENGTH..MAX_LENGTH

    Returns:
        Password of exactly max_len characters

    Raises:
        ContractViolation: If max_len is out of range or no class is enabled
    """
    if not MIN_LENGTH <= max_len <= MAX_LENGTH:
        raise ContractViolation(
            f"length must be between {MIN_LENGTH} and {MAX_LENGTH}, got {max_len}"
        )

    pool = candidate_chars(rule)
    if not pool:
        raise ContractViolation("at least one character class must be enabled")

    # Step 1: free slots from the combined pool
    generated = []
    for _ in range(max_len - count_classes(rule)):
        generated.append(pool[entropy.take(len(pool))])

    # Step 2: one mandatory character per enabled class
    one_char_per_rule = []
    for bit, chars in enumerate(PASSWORD_CHARS):
        if rule & (1 << bit):
            one_char_per_rule.append(chars[entropy.take(len(chars))])

    # Step 3: scatter them (range grows by one after each insert).
    # An empty list has a single slot; dividing by 1 leaves entropy as is.
    for char in one_char_per_rule:
        generated.insert(entropy.take(len(generated) or 1), char)

    return "".join(generated)
