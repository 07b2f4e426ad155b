#!/usr/bin/env python3

# Copyright (C) 2023 The ecrecovery developers
#
# This file is part of ecrecovery. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecrecovery including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""SEC compressed/uncompressed point representation.

Square roots modulo p are python-ecdsa's
ecdsa.numbertheory.square_root_mod_prime.
"""

from typing import Optional

from ecdsa.numbertheory import SquareRootError, square_root_mod_prime

from ecrecovery.alias import Octets, Point
from ecrecovery.curve import Curve, secp256r1
from ecrecovery.exceptions import ECRecoveryValueError
from ecrecovery.utils import bytes_from_octets, hex_string, int_repr


def point_from_x(x_Q: int, odd: int, ec: Optional[Curve] = None) -> Point:
    """Return the point with x_Q as x-coordinate and the given y parity.

    This is the decompression of the SEC 1 v.2 (section 2.3.4)
    compressed representation (0x02 | odd) || x_Q.
    """

    ec = secp256r1 if ec is None else ec
    if not 0 <= x_Q < ec.p:
        raise ECRecoveryValueError(f"x-coordinate not in 0..p-1: {int_repr(x_Q)}")
    y2 = (x_Q * x_Q * x_Q + ec.curve.a() * x_Q + ec.curve.b()) % ec.p
    try:
        y_Q = square_root_mod_prime(y2, ec.p)
    except SquareRootError as e:
        raise ECRecoveryValueError(f"invalid x-coordinate: {int_repr(x_Q)}") from e
    # (x, 0) is not a point of a prime odd order subgroup
    if y_Q == 0:
        raise ECRecoveryValueError(f"invalid x-coordinate: {int_repr(x_Q)}")
    if y_Q & 1 != odd & 1:
        y_Q = ec.p - y_Q
    return x_Q, y_Q


def bytes_from_point(
    Q: Point, ec: Optional[Curve] = None, compressed: bool = True
) -> bytes:
    """Return a point as compressed/uncompressed octet sequence.

    Return a point as compressed (0x02, 0x03) or uncompressed (0x04)
    octet sequence, according to SEC 1 v.2, section 2.3.3.
    """

    ec = secp256r1 if ec is None else ec
    ec.require_on_curve(Q)

    if Q[1] == 0:
        raise ECRecoveryValueError("no bytes representation for infinity point")

    x_bytes = Q[0].to_bytes(ec.p_size, byteorder="big", signed=False)
    if compressed:
        return (b"\x03" if Q[1] & 1 else b"\x02") + x_bytes
    return b"\x04" + x_bytes + Q[1].to_bytes(ec.p_size, byteorder="big", signed=False)


def point_from_octets(pub_key: Octets, ec: Optional[Curve] = None) -> Point:
    "Return the curve point of a SEC 1 v.2 (section 2.3.4) octet sequence."

    ec = secp256r1 if ec is None else ec
    pub_key = bytes_from_octets(pub_key, (ec.p_size + 1, 2 * ec.p_size + 1))

    bsize = len(pub_key)
    if pub_key[0] in (0x02, 0x03):
        if bsize != ec.p_size + 1:
            err_msg = "invalid size for compressed point: "
            err_msg += f"{bsize} instead of {ec.p_size + 1}"
            raise ECRecoveryValueError(err_msg)
        x_Q = int.from_bytes(pub_key[1:], byteorder="big", signed=False)
        try:
            return point_from_x(x_Q, pub_key[0] & 1, ec)
        except ECRecoveryValueError as e:
            msg = f"invalid x-coordinate: '{hex_string(x_Q)}'"
            raise ECRecoveryValueError(msg) from e
    if pub_key[0] == 0x04:
        if bsize != 2 * ec.p_size + 1:
            err_msg = "invalid size for uncompressed point: "
            err_msg += f"{bsize} instead of {2 * ec.p_size + 1}"
            raise ECRecoveryValueError(err_msg)
        x_Q = int.from_bytes(pub_key[1 : ec.p_size + 1], byteorder="big", signed=False)
        y_Q = int.from_bytes(pub_key[ec.p_size + 1 :], byteorder="big", signed=False)
        if y_Q == 0:
            raise ECRecoveryValueError("no bytes representation for infinity point")
        if ec.is_on_curve((x_Q, y_Q)):
            return x_Q, y_Q
        raise ECRecoveryValueError(f"point not on curve: {(x_Q, y_Q)}")
    raise ECRecoveryValueError(f"not a point: {pub_key!r}")
