#!/usr/bin/env python3

# Copyright (C) 2023 The ecrecovery developers
#
# This file is part of ecrecovery. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecrecovery including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Prime order elliptic curve subgroups and the secp256r1 named curve.

The curve arithmetic is python-ecdsa's:
Curve wraps an ecdsa.ellipticcurve.CurveFp and its generator,
an ecdsa.ellipticcurve.PointJacobi of prime order n.

* SEC 1 v.2 section 3.1.1.2.1 (curve parameter validation)
  http://www.secg.org/sec1-v2.pdf
* SEC 2 v.2 section 2.4.2 / FIPS PUB 186-4 D.1.2.3 (secp256r1)
  http://www.secg.org/sec2-v2.pdf
"""

from typing import Any, Dict, Optional, Sequence

from ecdsa.curves import NIST256p
from ecdsa.ellipticcurve import INFINITY, CurveFp, PointJacobi
from ecdsa.numbertheory import is_prime

from ecrecovery.alias import INF, Integer, Point
from ecrecovery.exceptions import ECRecoveryValueError
from ecrecovery.utils import int_from_integer, int_repr


class Curve:
    """Prime order subgroup of the points of an elliptic curve over Fp.

    p_size is the byte length of field elements,
    n_size the byte length of scalars.
    """

    def __init__(self, curve: CurveFp, G: PointJacobi, n: int, h: int = 1) -> None:
        self.curve = curve
        self.p = curve.p()
        self.p_size = (self.p.bit_length() + 7) // 8
        self.G = G
        self.n = n
        self.nlen = n.bit_length()
        self.n_size = (self.nlen + 7) // 8
        self.h = h

    @classmethod
    def from_parameters(
        cls,
        p: Integer,
        a: Integer,
        b: Integer,
        G: Sequence[Integer],
        n: Integer,
        h: int = 1,
    ) -> "Curve":
        "Return the curve y^2 = x^3 + a*x + b over Fp, after validation."

        p = int_from_integer(p)
        a = int_from_integer(a)
        b = int_from_integer(b)
        n = int_from_integer(n)

        if not is_prime(p) or p < 5:
            raise ECRecoveryValueError(f"p is not prime: {int_repr(p)}")
        if not 0 <= a < p:
            raise ECRecoveryValueError(f"a not in 0..p-1: {int_repr(a)}")
        if not 0 <= b < p:
            raise ECRecoveryValueError(f"b not in 0..p-1: {int_repr(b)}")
        if (4 * a * a * a + 27 * b * b) % p == 0:
            raise ECRecoveryValueError("zero discriminant")
        curve = CurveFp(p, a, b, h)

        if len(G) != 2:
            raise ECRecoveryValueError("Generator must a be a sequence[int, int]")
        x_G, y_G = int_from_integer(G[0]), int_from_integer(G[1])
        if not (0 <= x_G < p and 0 < y_G < p and curve.contains_point(x_G, y_G)):
            raise ECRecoveryValueError("Generator is not on the curve")

        if not is_prime(n):
            raise ECRecoveryValueError(f"n is not prime: {int_repr(n)}")
        # Hasse theorem: |h*n - (p+1)| <= 2*sqrt(p)
        if (h * n - p - 1) ** 2 > 4 * p:
            err_msg = f"h*n not in p+1-2*sqrt(p)..p+1+2*sqrt(p): {h}*{int_repr(n)}"
            raise ECRecoveryValueError(err_msg)

        GJ = PointJacobi(curve, x_G, y_G, 1, n)
        if GJ * n != INFINITY:
            raise ECRecoveryValueError(f"n is not the group order: {int_repr(n)}")
        return cls(curve, GJ, n, h)

    def is_on_curve(self, Q: Point) -> bool:
        "Return True if the affine point (or INF) is on the curve."
        if len(Q) != 2:
            raise ECRecoveryValueError("point must be a tuple[int, int]")
        if Q[1] == 0:
            return True
        x_Q, y_Q = Q
        return 0 <= x_Q < self.p and 0 < y_Q < self.p and self.curve.contains_point(*Q)

    def require_on_curve(self, Q: Point) -> None:
        if not self.is_on_curve(Q):
            raise ECRecoveryValueError("point not on curve")

    def jac_from_aff(self, Q: Point) -> Any:
        "Return the python-ecdsa point of an affine point assumed on curve."
        if Q[1] == 0:
            return INFINITY
        return PointJacobi(self.curve, Q[0], Q[1], 1, self.n)

    @staticmethod
    def aff_from_jac(QJ: Any) -> Point:
        "Return the affine point of a python-ecdsa point, INF for INFINITY."
        if QJ == INFINITY:
            return INF
        return QJ.x(), QJ.y()


def mult(m: Integer, Q: Optional[Point] = None, ec: Optional["Curve"] = None) -> Point:
    """Elliptic curve scalar multiplication.

    The m coefficient is reduced mod n, hence negative values are allowed.
    If Q is not provided, the curve generator is used.
    """
    ec = secp256r1 if ec is None else ec
    if Q is None:
        QJ = ec.G
    else:
        ec.require_on_curve(Q)
        QJ = ec.jac_from_aff(Q)
    m = int_from_integer(m) % ec.n
    return ec.aff_from_jac(QJ * m)


secp256r1 = Curve(NIST256p.curve, NIST256p.generator, NIST256p.order)

# names are case insensitive: keys must be lower case
CURVES: Dict[str, Curve] = {
    "secp256r1": secp256r1,
    "prime256v1": secp256r1,
    "p-256": secp256r1,
    "nist256p": secp256r1,
}


def curve_from_name(ec_name: str) -> Curve:
    "Return the named curve, raising an error for unknown names."
    try:
        return CURVES[ec_name.strip().lower()]
    except KeyError as e:
        raise ECRecoveryValueError(f"unknown curve: '{ec_name}'") from e
