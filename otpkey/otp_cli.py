#!/usr/bin/env python3
"""
otp_cli.py — command line surface for otpkey.

Subcommands:
- init    : create the key file template (~/.otpkey.toml)
- list    : list configured keys (label / issuer)
- calc    : print the current code for a key and how long it stays valid
- uri     : print the otpauth:// URI of a key
- secret  : print a fresh random Base32 secret
- qrcodes : serve a local page with QR codes for every key

Usage examples:
  otpkey init
  otpkey calc github
  otpkey calc bank --counter 4
  otpkey --config ./keys.toml list
  otpkey qrcodes --port 3000
"""

import argparse
import logging
import sys
import time

from otpkey import config
from otpkey.errors import OTPError
from otpkey.key import Method
from otpkey.otp_core import generate_base32_secret

logger = logging.getLogger(__name__)


def _get_key(args):
    keys = config.load_keys(args.config)
    if args.label not in keys:
        raise OTPError(f"no key named {args.label!r} in {config.get_config_path(args.config)}")
    return keys[args.label]


# --- CLI command handlers ---
def cmd_help(args):
    args.parser.print_help()


def cmd_init(args):
    path = config.get_config_path(args.config)
    if config.init_config(path):
        print(f"Created {path}")
    else:
        print(f"{path} already exists")


def cmd_list(args):
    keys = config.load_keys(args.config)
    lines = [f"{label}\t{key.issuer}" for label, key in keys.items()]
    width = max([len("Label\tIssuer")] + [len(line) for line in lines])
    print("Label\tIssuer")
    print("-" * (width + 4))
    for line in lines:
        print(line)


def cmd_calc(args):
    key = _get_key(args)
    if key.method == Method.HOTP:
        if args.counter is None:
            raise OTPError(f"{args.label!r} is an HOTP key; pass --counter")
        code = key.get_hotp_code(args.counter)
        print(f"{code} (counter {args.counter})")
        return
    if args.counter is not None:
        raise OTPError(f"{args.label!r} is a TOTP key; --counter only applies to HOTP keys")
    now = int(time.time())
    code = key.get_totp_code(now)
    remaining = key.seconds_remaining(now)
    logger.debug("TOTP: label=%s, period=%ss", args.label, key.period)
    print(f"{code} ({remaining} seconds)")


def cmd_uri(args):
    print(_get_key(args).to_uri())


def cmd_secret(args):
    print(generate_base32_secret())


def cmd_qrcodes(args):
    from otpkey_web import serve

    keys = config.load_keys(args.config)
    print(f"serving QR codes at http://{args.host}:{args.port}")
    serve(keys, host=args.host, port=args.port)


# --- Argparse builder ---
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="otpkey", description="TOTP/HOTP one-time password generator")
    p.add_argument("--config", help=f"Key file (default: ${config.CONFIG_ENV} or ~/{config.CONFIG_FILE})")
    p.add_argument("--verbose", action="store_true", help="Verbose output")
    sub = p.add_subparsers(dest="cmd")
    p.set_defaults(func=cmd_help, parser=p)

    # init
    pi = sub.add_parser("init", help="Create the key file template")
    pi.set_defaults(func=cmd_init)

    # list
    pl = sub.add_parser("list", help="List keys")
    pl.set_defaults(func=cmd_list)

    # calc
    pc = sub.add_parser("calc", help="Calculate a one-time password")
    pc.add_argument("label", help="Key label as defined in the key file")
    pc.add_argument("--counter", type=int, help="Counter value (HOTP keys only)")
    pc.set_defaults(func=cmd_calc)

    # uri
    pu = sub.add_parser("uri", help="Print the otpauth URI of a key")
    pu.add_argument("label", help="Key label as defined in the key file")
    pu.set_defaults(func=cmd_uri)

    # secret
    ps = sub.add_parser("secret", help="Generate a random Base32 secret")
    ps.set_defaults(func=cmd_secret)

    # qrcodes
    pq = sub.add_parser("qrcodes", help="Start a local server with QR codes")
    pq.add_argument("--host", default="127.0.0.1")
    pq.add_argument("--port", type=int, default=3000)
    pq.set_defaults(func=cmd_qrcodes)

    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[+] %(name)s: %(message)s",
    )
    try:
        args.func(args)
    except OTPError as e:
        print(f"[!] {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
