"""
LessPWM - Profile Module

This file handles:
- Character rules (which classes a password may use)
- Password profiles (everything that identifies one site password)
- Input validation
- The public generate_password() entry point

Nothing here is stored anywhere. A profile is built, used once, and
thrown away. The master password is passed alongside the profile, never
inside it, so a profile is always safe to print or log.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Union

from . import crypto
from .crypto import ContractViolation


logger = logging.getLogger(__name__)


# =============================================================================
# CHARACTER RULE
# =============================================================================

@dataclass(frozen=True)
class CharRule:
    """
    4-bit mask selecting the character classes a password draws from.

    Bit layout (matches crypto.PASSWORD_CHARS):
        bit 0 - lowercase a-z
        bit 1 - uppercase A-Z
        bit 2 - digits 0-9
        bit 3 - symbols

    Usage:
        rule = CharRule()                      # all four classes
        rule = CharRule().not_use_symbols()    # letters and digits only

    The not_use_* methods flip their bit, so calling one twice turns the
    class back on.
    """

    bits: int = crypto.ALL_CLASSES

    def __post_init__(self):
        # 8-bit field; only the low four bits select classes
        if not _is_int(self.bits) or not 0 <= self.bits <= 0xFF:
            raise ContractViolation(f"rule must be an integer in 0..255, got {self.bits!r}")

    def _flip(self, bit: int) -> "CharRule":
        return CharRule(self.bits ^ (1 << bit))

    def not_use_lowercase(self) -> "CharRule":
        return self._flip(0)

    def not_use_uppercase(self) -> "CharRule":
        return self._flip(1)

    def not_use_digits(self) -> "CharRule":
        return self._flip(2)

    def not_use_symbols(self) -> "CharRule":
        return self._flip(3)

    @classmethod
    def from_flags(
        cls,
        no_lowercase: bool = False,
        no_uppercase: bool = False,
        no_digits: bool = False,
        no_symbols: bool = False,
    ) -> "CharRule":
        """Build a rule from the command-line class-disable flags."""
        rule = cls()
        if no_lowercase:
            rule = rule.not_use_lowercase()
        if no_uppercase:
            rule = rule.not_use_uppercase()
        if no_digits:
            rule = rule.not_use_digits()
        if no_symbols:
            rule = rule.not_use_symbols()
        return rule

    def uses(self, bit: int) -> bool:
        return bool(self.bits & (1 << bit))

    def enabled_classes(self) -> List[str]:
        return [name for bit, name in enumerate(crypto.CLASS_NAMES) if self.uses(bit)]

    def class_count(self) -> int:
        return crypto.count_classes(self.bits)

    def __str__(self):
        return "+".join(self.enabled_classes()) or "none"


# =============================================================================
# PASSWORD PROFILE
# =============================================================================

@dataclass(frozen=True)
class PasswordProfile:
    """
    Everything (except the master password) that identifies one password.

    Usage:
        profile = PasswordProfile("example.org", "contact@example.org")
        password = generate_password(profile, master_password)

        # Rotate: same site/login, new password
        profile = PasswordProfile("example.org", "contact@example.org", counter=2)
    """

    site: str
    login: str
    max_len: int = crypto.DEFAULT_LENGTH
    counter: int = crypto.DEFAULT_COUNTER
    char_rule: CharRule = field(default_factory=CharRule)

    def validate(self) -> None:
        """
        Check the profile can produce a password.

        Runs before any key derivation, so a bad request fails instantly
        instead of after 100,000 PBKDF2 rounds.

        Raises:
            ContractViolation: On out-of-range length/counter or empty rule
        """
        if not _is_int(self.max_len):
            raise ContractViolation(f"length must be an integer, got {self.max_len!r}")
        if not crypto.MIN_LENGTH <= self.max_len <= crypto.MAX_LENGTH:
            raise ContractViolation(
                f"length must be between {crypto.MIN_LENGTH} and "
                f"{crypto.MAX_LENGTH}, got {self.max_len}"
            )

        if not _is_int(self.counter):
            raise ContractViolation(f"counter must be an integer, got {self.counter!r}")
        if not 0 <= self.counter <= crypto.MAX_COUNTER:
            raise ContractViolation(
                f"counter must be between 0 and {crypto.MAX_COUNTER}, got {self.counter}"
            )

        if self.char_rule.class_count() == 0:
            raise ContractViolation("at least one character class must be enabled")


def _is_int(value) -> bool:
    # bool is an int subclass; True is not a length
    return isinstance(value, int) and not isinstance(value, bool)


# =============================================================================
# PUBLIC API
# =============================================================================

def generate_password(profile: PasswordProfile, master_password: Union[str, bytes]) -> str:
    """
    Derive the password for a profile.

    Same profile + same master password = same password, every time.

    Args:
        profile: Site, login, length, counter and character rule
        master_password: User's secret (never stored, never logged)

    Returns:
        Password string of exactly profile.max_len characters

    Raises:
        ContractViolation: If the profile is invalid (nothing is derived)
    """
    profile.validate()

    logger.debug(
        "Deriving password: site=%d chars, login=%d chars, counter=%d, length=%d, rule=%s",
        len(profile.site), len(profile.login), profile.counter,
        profile.max_len, profile.char_rule,
    )

    entropy = crypto.derive_entropy(
        profile.site, profile.login, profile.counter, master_password
    )
    return crypto.derive_password(entropy, profile.char_rule.bits, profile.max_len)
