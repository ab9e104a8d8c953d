"""
LessPWM - Stateless Password Manager

Derives site passwords from one master password. Nothing is stored:
the same inputs always regenerate the same password.

Key Features:
- Stateless: no vault, no database, no sync
- Strong KDF: PBKDF2-HMAC-SHA256, 100,000 rounds
- Character rules: lowercase / uppercase / digits / symbols, each
  guaranteed to appear at least once when enabled
- Rotation: bump the counter to get a new password for the same site

Components:
- crypto.py: Entropy derivation and password encoding
- profile.py: Character rules, password profiles, generate_password()
- lesspwm_main.py: Command-line interface (uses built-in argparse)

Usage:
    lesspwm gen -s example.org -l me@example.org            # prompts for master password
    lesspwm gen -s example.org -l me@example.org -C 2       # rotated password
    lesspwm gen -s example.org -l me@example.org --no-symbols -L 20
"""

__version__ = "0.1.0"
__author__ = "LessPWM Team"

from .crypto import ContractViolation
from .profile import CharRule, PasswordProfile, generate_password

__all__ = [
    "CharRule",
    "ContractViolation",
    "PasswordProfile",
    "generate_password",
]
