#!/usr/bin/env python3
"""
API key generator.

Prints a random URL-safe key suitable for the API_KEY setting.

Usage:
    generate-api-key          # 32 random bytes
    generate-api-key 48       # between 16 and 64 bytes
"""

import argparse
import base64
import secrets
import sys
from typing import List, Optional

BYTES_DEFAULT = 32
MIN_BYTES = 16
MAX_BYTES = 64


def generate_api_key(num_bytes: int = BYTES_DEFAULT) -> str:
    """
    Return num_bytes of randomness as unpadded base64url.

    Raises:
        ValueError: If num_bytes is outside [MIN_BYTES, MAX_BYTES]
    """
    if not MIN_BYTES <= num_bytes <= MAX_BYTES:
        raise ValueError(f"bytes must be an integer between {MIN_BYTES} and {MAX_BYTES}")

    key = base64.urlsafe_b64encode(secrets.token_bytes(num_bytes))
    return key.rstrip(b"=").decode("ascii")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="generate-api-key",
        description="Generate an API key for the Portfolio Recommender API",
    )
    parser.add_argument(
        "bytes",
        nargs="?",
        default=str(BYTES_DEFAULT),
        help=f"Number of random bytes ({MIN_BYTES}-{MAX_BYTES}, default {BYTES_DEFAULT})",
    )
    args = parser.parse_args(argv)

    try:
        api_key = generate_api_key(int(args.bytes))
    except ValueError:
        print(
            f"Usage: generate-api-key [bytes]\n"
            f"- bytes must be an integer between {MIN_BYTES} and {MAX_BYTES}",
            file=sys.stderr,
        )
        return 1

    print(api_key)
    return 0


if __name__ == "__main__":
    sys.exit(main())
