"""
LessPWM - Guided Derivation Walk-through (single run, no user input)

Run: python demo.py

This script shows what `lesspwm gen` does under the hood, one stage at a time:
 - Salt construction from site + login + counter
 - PBKDF2 entropy derivation
 - Candidate pool for the character rule
 - Final password (matches the known-answer vectors)
 - Counter rotation and character rules
 - A rejected request (length below the minimum)

All steps print the CLI-style output plus a short "behind the scenes" note.
"""

from textwrap import indent

from lesspwm import crypto
from lesspwm.profile import CharRule, ContractViolation, PasswordProfile, generate_password


LINE = "=" * 70


def step(title: str, command: str, code_path: str):
    print(f"\n{LINE}\n{title}  (command: {command}, code: {code_path})\n{LINE}")


def explain(title: str, body: str):
    print(f"\n[Behind the scenes] {title}")
    print(indent(body.strip(), "  "))


def main():
    master_password = "password"
    site = "example.org"
    login = "contact@example.org"

    # 1) Salt
    step("Build salt", "-", "lesspwm/crypto.py:build_salt")
    for counter in (1, 2, 255):
        print(f"  counter={counter:<4} salt={crypto.build_salt(site, login, counter)!r}")
    explain(
        "Per-identity salt",
        "The counter is appended as bare lowercase hex. A different counter means a different "
        "salt, so the same site/login gets an unrelated password.",
    )

    # 2) Entropy
    step("Derive entropy", "-", "lesspwm/crypto.py:derive_entropy")
    entropy = crypto.derive_entropy(site, login, 1, master_password)
    print(f"  {entropy!r}")
    explain(
        "PBKDF2-HMAC-SHA256",
        f"{crypto.KDF_ITERATIONS} rounds turn the master password + salt into {crypto.ENTROPY_SIZE} bytes, "
        "read as one big-endian 256-bit integer. This is the only slow part of a derivation.",
    )

    # 3) Candidate pool
    step("Candidate pool", "-", "lesspwm/crypto.py:candidate_chars")
    rule = CharRule()
    pool = crypto.candidate_chars(rule.bits)
    print(f"  rule={rule}  pool size={len(pool)}")
    print(f"  free slots for length 16: {16 - rule.class_count()}")

    # 4) Password
    step("Derive password", f"lesspwm gen -s {site} -l {login}", "lesspwm/crypto.py:derive_password")
    password = crypto.derive_password(entropy, rule.bits, 16)
    print(f"  Output: {password}")
    explain(
        "Positional encoding",
        "Free slots are drawn from the whole pool with divmod, then one character per enabled class "
        "is drawn and inserted at an entropy-chosen position. Every class is guaranteed to appear.",
    )

    # 5) Rotation and rules
    step("Rotation and rules", "lesspwm gen ... -C/-L/--no-*", "lesspwm/profile.py:generate_password")
    samples = [
        ("Rotated, no symbols", PasswordProfile(site, login, 14, 2, CharRule().not_use_symbols())),
        ("PIN-style", PasswordProfile(site, login, 16, 1, CharRule.from_flags(True, True, False, True))),
        ("No digits", PasswordProfile(site, login, 16, 1, CharRule().not_use_digits())),
    ]
    for label, profile in samples:
        print(f"  {label:<20} {generate_password(profile, master_password)}")

    # 6) Rejected request
    step("Rejected request", f"lesspwm gen -s {site} -l {login} -L 3", "lesspwm/profile.py:validate")
    try:
        generate_password(PasswordProfile(site, login, max_len=3), master_password)
    except ContractViolation as e:
        print(f"  ERROR: {e}")
    explain(
        "Fail before deriving",
        "Profiles are validated before PBKDF2 runs. A bad request never yields a password.",
    )


if __name__ == "__main__":
    main()
