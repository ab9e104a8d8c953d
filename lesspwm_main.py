"""
LessPWM - Command Line

Main user interface for the stateless password manager.
Features:
- Generate a site password from site + login + counter
- Disable character classes (--no-lowercase, --no-symbols, ...)
- Prompt for the master password without echo
- Copy to clipboard instead of printing

Usage:
    lesspwm gen -s example.org -l contact@example.org
    lesspwm gen -s example.org -l contact@example.org -L 14 -C 2 --no-symbols
    lesspwm gen -s example.org -l contact@example.org --copy
"""

import argparse
import getpass
import logging
import sys

from lesspwm import __version__
from lesspwm import crypto
from lesspwm.profile import CharRule, ContractViolation, PasswordProfile, generate_password


logger = logging.getLogger("lesspwm")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


def build_parser():
    parser = argparse.ArgumentParser(prog="lesspwm", description="LessPWM - stateless password manager")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to execute")

    gen = subparsers.add_parser("gen", help="generate a site password")
    gen.add_argument("-s", "--site", required=True,
                     help="site used in the password generation")
    gen.add_argument("-l", "--login", required=True,
                     help="login used in the password generation")
    gen.add_argument("-L", "--length", type=int, default=crypto.DEFAULT_LENGTH,
                     help=f"password length [{crypto.DEFAULT_LENGTH}]")
    gen.add_argument("-C", "--counter", type=int, default=crypto.DEFAULT_COUNTER,
                     help=f"password counter [{crypto.DEFAULT_COUNTER}]")
    gen.add_argument("--no-lowercase", action="store_true", help="do not use lowercase letters")
    gen.add_argument("--no-uppercase", action="store_true", help="do not use uppercase letters")
    gen.add_argument("--no-digits", action="store_true", help="do not use digits")
    gen.add_argument("--no-symbols", action="store_true", help="do not use symbols")
    gen.add_argument("-p", "--password", dest="master_password",
                     help="master password used in password generation, or else prompt from tty")
    gen.add_argument("-c", "--copy", action="store_true",
                     help="copy to clipboard instead of printing")
    return parser


def profile_from_args(args) -> PasswordProfile:
    """Map parsed `gen` arguments 1:1 onto a PasswordProfile."""
    rule = CharRule.from_flags(
        no_lowercase=args.no_lowercase,
        no_uppercase=args.no_uppercase,
        no_digits=args.no_digits,
        no_symbols=args.no_symbols,
    )
    return PasswordProfile(
        site=args.site,
        login=args.login,
        max_len=args.length,
        counter=args.counter,
        char_rule=rule,
    )


def copy_to_clipboard(secret: str) -> bool:
    try:
        import pyperclip
    except ImportError:
        print("(pyperclip not installed - run: pip install pyperclip)", file=sys.stderr)
        return False
    try:
        pyperclip.copy(secret)
    except pyperclip.PyperclipException as e:
        print(f"(clipboard unavailable: {e})", file=sys.stderr)
        return False
    return True


def cmd_gen(args) -> int:
    profile = profile_from_args(args)
    # Reject bad input before prompting for anything
    profile.validate()

    master_password = args.master_password
    if master_password is None:
        master_password = getpass.getpass("master password: ")

    password = generate_password(profile, master_password)

    if args.copy and copy_to_clipboard(password):
        print(f"✓ Password for '{profile.login}' on '{profile.site}' copied to clipboard!")
    else:
        print(password)
    return EXIT_OK


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
        force=True,
    )

    try:
        return cmd_gen(args)
    except ContractViolation as e:
        logger.debug("Rejected request: %s", e)
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_ERROR
    except KeyboardInterrupt:
        print("\nExiting...", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
