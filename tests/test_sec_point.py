#!/usr/bin/env python3

# Copyright (C) 2023 The ecrecovery developers
#
# This file is part of ecrecovery. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecrecovery including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Tests for the `ecrecovery.sec_point` module."

import pytest

from ecrecovery.alias import INF
from ecrecovery.curve import mult, secp256r1
from ecrecovery.exceptions import ECRecoveryValueError
from ecrecovery.sec_point import bytes_from_point, point_from_octets, point_from_x
from tests.test_curve import low_card_curves


def test_bytes_from_point() -> None:
    ec = secp256r1
    Q = mult(2)
    Q_bytes = bytes_from_point(Q)
    assert len(Q_bytes) == ec.p_size + 1
    assert Q_bytes[0] == (0x03 if Q[1] & 1 else 0x02)
    assert point_from_octets(Q_bytes) == Q
    assert point_from_octets(Q_bytes.hex()) == Q

    Q_bytes = bytes_from_point(Q, ec, compressed=False)
    assert len(Q_bytes) == 2 * ec.p_size + 1
    assert Q_bytes[0] == 0x04
    assert point_from_octets(Q_bytes, ec) == Q

    with pytest.raises(ECRecoveryValueError, match="no bytes representation for "):
        bytes_from_point(INF)

    with pytest.raises(ECRecoveryValueError, match="point not on curve"):
        bytes_from_point((Q[0], Q[1] + 1))


def test_point_from_octets() -> None:
    ec = secp256r1
    Q = mult(3)
    compressed = bytes_from_point(Q)
    uncompressed = bytes_from_point(Q, compressed=False)

    err_msg = "invalid size for compressed point: "
    with pytest.raises(ECRecoveryValueError, match=err_msg):
        point_from_octets(compressed[:1] + uncompressed[1:])

    err_msg = "invalid size for uncompressed point: "
    with pytest.raises(ECRecoveryValueError, match=err_msg):
        point_from_octets(uncompressed[:1] + compressed[1:])

    with pytest.raises(ECRecoveryValueError, match="not a point: "):
        point_from_octets(b"\x05" + compressed[1:])

    with pytest.raises(ECRecoveryValueError, match="invalid size: "):
        point_from_octets(compressed[:-1])

    with pytest.raises(ECRecoveryValueError, match="point not on curve: "):
        y = (Q[1] + 1).to_bytes(ec.p_size, byteorder="big", signed=False)
        point_from_octets(uncompressed[: ec.p_size + 1] + y)

    with pytest.raises(ECRecoveryValueError, match="no bytes representation for "):
        point_from_octets(uncompressed[: ec.p_size + 1] + b"\x00" * ec.p_size)

    # x-coordinate not less than p
    x = ec.p.to_bytes(ec.p_size, byteorder="big", signed=False)
    with pytest.raises(ECRecoveryValueError, match="invalid x-coordinate: "):
        point_from_octets(b"\x02" + x)


def test_point_from_x() -> None:
    for ec in low_card_curves.values():
        for q in range(1, ec.n):
            Q = mult(q, ec=ec)
            assert point_from_x(Q[0], Q[1] & 1, ec) == Q
            assert point_from_x(Q[0], 1 - (Q[1] & 1), ec) == (Q[0], ec.p - Q[1])

    ec = secp256r1
    Q = mult(7)
    assert point_from_x(Q[0], Q[1]) == Q
    assert point_from_x(Q[0], Q[1] + 2) == Q

    x_invalid = 0
    while True:
        try:
            point_from_x(x_invalid, 0)
        except ECRecoveryValueError:
            break
        x_invalid += 1
    # x^3 + a*x + b is a quadratic non-residue mod p
    y2 = (x_invalid**3 + ec.curve.a() * x_invalid + ec.curve.b()) % ec.p
    assert pow(y2, (ec.p - 1) // 2, ec.p) == ec.p - 1
    with pytest.raises(ECRecoveryValueError, match="invalid x-coordinate: "):
        point_from_x(x_invalid, 0)

    for x in (-1, ec.p):
        with pytest.raises(ECRecoveryValueError, match="x-coordinate not in 0..p-1: "):
            point_from_x(x, 0)
