#!/usr/bin/env python3

# Copyright (C) 2023 The ecrecovery developers
#
# This file is part of ecrecovery. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecrecovery including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Conversion utilities between octets, integers, and hex-strings.

Conversions follow SEC 1 v.2 section 2.3:
https://www.secg.org/sec1-v2.pdf
"""

from typing import Iterable, Optional, Union

from ecrecovery.alias import Integer, Octets
from ecrecovery.exceptions import ECRecoveryTypeError, ECRecoveryValueError

# above this value integers are shown as hex-strings in error messages
HEX_THRESHOLD = 0xFFFFFFFF


def bytes_from_octets(
    octets: Octets, out_size: Optional[Union[int, Iterable[int]]] = None
) -> bytes:
    """Return bytes from bytes or hex-string.

    Whitespaces in hex-strings are ignored.
    If out_size is an int (or a collection of ints),
    the byte length must be equal to it (or one of them).
    """

    if isinstance(octets, str):
        octets = bytes.fromhex(octets)
    elif not isinstance(octets, bytes):
        raise ECRecoveryTypeError(f"not octets: {type(octets).__name__}")

    if out_size is None:
        return octets
    sizes = (out_size,) if isinstance(out_size, int) else tuple(out_size)
    if len(octets) not in sizes:
        err_msg = f"invalid size: {len(octets)} bytes instead of {out_size}"
        raise ECRecoveryValueError(err_msg)
    return octets


def int_from_leftmost_bytes(octets: Octets, size: int) -> int:
    """Return the big-endian integer of the leftmost size bytes.

    Trailing bytes beyond size are discarded,
    shorter octets are used as they are.
    No modular reduction is performed.
    """

    octets = bytes_from_octets(octets)
    return int.from_bytes(octets[:size], byteorder="big", signed=False)


def int_from_integer(i: Integer) -> int:
    """Return an int from int, big-endian bytes, or hex-string.

    Hex-strings may have a '0x' prefix, a leading minus sign,
    odd length, and whitespaces: "1a", "0x1A", "dead beef", "-0xff".
    """

    if isinstance(i, int):
        return i
    if isinstance(i, bytes):
        return int.from_bytes(i, byteorder="big", signed=False)
    if not isinstance(i, str):
        raise ECRecoveryTypeError(f"not an integer: {type(i).__name__}")

    hex_str = "".join(i.split()).lower()
    try:
        return int(hex_str, 16)
    except ValueError as e:
        raise ECRecoveryValueError(f"invalid hex-string: '{hex_str}'") from e


def hex_string(i: Integer) -> str:
    """Return the upper case hex-string of a non-negative integer.

    Digits are grouped in blocks of eight, separated by spaces,
    e.g. "01 DEADBEEF".
    """

    int_ = int_from_integer(i)
    if int_ < 0:
        raise ECRecoveryValueError(f"negative integer: {int_}")
    digits = f"{int_:X}"
    digits = digits.zfill(len(digits) + len(digits) % 2)
    first = len(digits) % 8 or 8
    blocks = [digits[:first]]
    blocks += [digits[j : j + 8] for j in range(first, len(digits), 8)]
    return " ".join(blocks)


def int_repr(i: int) -> str:
    "Return a message-friendly representation of an int."
    return f"'{hex_string(i)}'" if i > HEX_THRESHOLD else f"{i}"
