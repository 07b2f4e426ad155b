#!/usr/bin/env python3

# Copyright (C) 2023 The ecrecovery developers
#
# This file is part of ecrecovery. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecrecovery including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""ECDSA public key recovery.

Implementation according to SEC 1 v.2 section 4.1.6:

http://www.secg.org/sec1-v2.pdf

specialized for curves with cofactor 1 (e.g. secp256r1):
the x-coordinate of the ephemeral point R is r itself,
so that the candidate public key is selected directly by the recovery id,
whose lowest bit is the y-parity of R.
The 27/28 recovery id convention (i.e. 0/1 plus 27) is supported too.

The raising functions (recover_pub_key_, recover_pub_key, etc.)
follow the usual ecrecovery conventions;
recover_public_key never raises for recovery failures:
it returns a KeyRecoveryResult with either the X||Y hex-string
of the recovered public key or the error kind and message.

See also:
- https://crypto.stackexchange.com/questions/18105/how-does-recovering-the-public-key-from-an-ecdsa-signature-work/18106#18106
"""

import contextlib
import logging
from dataclasses import InitVar, dataclass
from hashlib import sha256
from typing import List, Optional, Type, TypeVar, Union

from dataclasses_json import DataClassJsonMixin
from ecdsa.ellipticcurve import INFINITY, PointJacobi
from ecdsa.numbertheory import inverse_mod

from ecrecovery.alias import HashF, Integer, Octets, Point
from ecrecovery.curve import Curve, curve_from_name, secp256r1
from ecrecovery.exceptions import (
    ArithmeticFailureError,
    ECRecoveryRuntimeError,
    ECRecoveryValueError,
    ErrorKind,
    InvalidPointError,
    InvalidRecoveryIdError,
    InvalidSignatureError,
    KeyRecoveryError,
    NoInverseError,
)
from ecrecovery.sec_point import bytes_from_point, point_from_octets, point_from_x
from ecrecovery.utils import (
    bytes_from_octets,
    int_from_integer,
    int_from_leftmost_bytes,
    int_repr,
)

_logger = logging.getLogger(__name__)

RECOVERY_IDS = (0, 1, 27, 28)
_RECOVERY_ID_OFFSET = 27

_Sig = TypeVar("_Sig", bound="Sig")


def canonical_recovery_id(recovery_id: int) -> int:
    """Return the recovery id as 0 or 1.

    27 and 28 are mapped to 0 and 1 respectively;
    any value not in (0, 1, 27, 28) is rejected.
    """
    if not isinstance(recovery_id, int) or recovery_id not in RECOVERY_IDS:
        err_msg = f"{recovery_id!r} not in {RECOVERY_IDS}"
        raise InvalidRecoveryIdError(err_msg)
    if recovery_id >= _RECOVERY_ID_OFFSET:
        recovery_id -= _RECOVERY_ID_OFFSET
    return recovery_id


def _scalar_from_integer(i: Integer, scalar_name: str) -> int:
    try:
        return int_from_integer(i)
    except ECRecoveryValueError as e:
        raise InvalidSignatureError(f"{scalar_name}: {e}") from e


def _assert_invertible_r(r: int, ec: Curve) -> None:
    # r multiplies the recovered key as r^-1
    if r % ec.n == 0:
        err_msg = f"r is a multiple of the curve order: {int_repr(r)}"
        raise NoInverseError(err_msg)


@dataclass(frozen=True)
class Sig:
    """ECDSA signature (r, s).

    Its compact serialization is the concatenation of r and s,
    each one as n_size bytes big-endian integer.
    """

    # scalar, 0 < r < ec.n (ec.n is the curve order)
    r: int
    # scalar, 0 < s < ec.n (ec.n is the curve order)
    s: int
    ec: Curve = secp256r1
    check_validity: InitVar[bool] = True

    def __post_init__(self, check_validity: bool) -> None:
        if check_validity:
            self.assert_valid()

    def assert_valid(self) -> None:
        _assert_invertible_r(self.r, self.ec)

        # r is a scalar, fail if r is not in [1, n-1]
        if not 0 < self.r < self.ec.n:
            err_msg = f"scalar r not in 1..n-1: {int_repr(self.r)}"
            raise InvalidSignatureError(err_msg)

        # s is a scalar, fail if s is not in [1, n-1]
        if not 0 < self.s < self.ec.n:
            err_msg = f"scalar s not in 1..n-1: {int_repr(self.s)}"
            raise InvalidSignatureError(err_msg)

    def serialize(self, check_validity: bool = True) -> bytes:
        "Serialize an ECDSA signature to its compact r||s representation."
        if check_validity:
            self.assert_valid()

        n_size = self.ec.n_size
        out = self.r.to_bytes(n_size, byteorder="big", signed=False)
        out += self.s.to_bytes(n_size, byteorder="big", signed=False)
        return out

    @classmethod
    def parse(
        cls: Type[_Sig],
        data: Octets,
        ec: Curve = secp256r1,
        check_validity: bool = True,
    ) -> _Sig:
        "Return a Sig by parsing its compact r||s representation."
        try:
            data = bytes_from_octets(data, 2 * ec.n_size)
        except ValueError as e:
            raise InvalidSignatureError(f"invalid compact signature: {e}") from e

        r = int.from_bytes(data[: ec.n_size], byteorder="big", signed=False)
        s = int.from_bytes(data[ec.n_size :], byteorder="big", signed=False)
        return cls(r, s, ec, check_validity)

    @classmethod
    def from_integers(
        cls: Type[_Sig], r: Integer, s: Integer, ec: Curve = secp256r1
    ) -> _Sig:
        """Return a Sig from hex-string, bytes, or int r and s.

        A non-invertible r is reported before s is even parsed.
        """
        r_int = _scalar_from_integer(r, "r")
        _assert_invertible_r(r_int, ec)
        s_int = _scalar_from_integer(s, "s")
        return cls(r_int, s_int, ec)


def _sig_from(sig: Union[Sig, Octets], ec: Curve) -> Sig:
    if isinstance(sig, Sig):
        sig.assert_valid()
        return sig
    return Sig.parse(sig, ec)


def _recover_pub_key_(recovery_id: int, e: int, r: int, s: int, ec: Curve) -> Point:
    # Private function provided for testing purposes only.
    # It assumes recovery_id in [0, 1] and r, s already validated.
    # Steps numbering follows SEC 1 v.2 section 4.1.6

    # only j = 0 is tried, i.e. x = r + j*n = r
    x_K = r  # 1.1
    try:
        x_K, y_K = point_from_x(x_K, recovery_id, ec)  # 1.2, 1.3
    except ECRecoveryValueError as err:
        err_msg = f"r is not a valid x-coordinate: {int_repr(r)}"
        raise InvalidPointError(err_msg) from err
    # no order for K: n*K is computed with n not reduced mod n
    KJ = PointJacobi(ec.curve, x_K, y_K, 1)

    if KJ * ec.n != INFINITY:  # 1.4
        raise InvalidPointError("n*R is not the point at infinity")

    # 1.5 has been performed in the calling function:
    # e is the leftmost p_size bytes of the message hash

    r_1 = inverse_mod(r % ec.n, ec.n)
    if r_1 == 0:
        raise NoInverseError(f"r mod n: {int_repr(r)}")

    # Q = r^-1 (s*R - e*G) = (r^-1 * s) R + (-r^-1 * e) G
    r1s = r_1 * s % ec.n
    r1e = -r_1 * e % ec.n
    return ec.aff_from_jac(KJ.mul_add(r1s, ec.G, r1e))  # 1.6.1


def recover_pub_key_(
    recovery_id: int,
    msg_hash: Octets,
    sig: Union[Sig, Octets],
    ec: Curve = secp256r1,
) -> Point:
    """ECDSA public key recovery (SEC 1 v.2 section 4.1.6).

    The recovery id must be in (0, 1, 27, 28).
    If msg_hash is longer than the curve field size,
    only its leftmost bytes are considered.
    The curve ec is used only if the signature is provided
    as compact octets, otherwise the Sig curve is used.
    """
    recovery_id = canonical_recovery_id(recovery_id)
    sig = _sig_from(sig, ec)

    e = int_from_leftmost_bytes(msg_hash, sig.ec.p_size)  # 1.5

    return _recover_pub_key_(recovery_id, e, sig.r, sig.s, sig.ec)


def recover_pub_key(
    recovery_id: int,
    msg: Octets,
    sig: Union[Sig, Octets],
    hf: HashF = sha256,
    ec: Curve = secp256r1,
) -> Point:
    """ECDSA public key recovery (SEC 1 v.2 section 4.1.6).

    The message msg is first processed by hf.
    """
    msg_hash = hf(bytes_from_octets(msg)).digest()
    return recover_pub_key_(recovery_id, msg_hash, sig, ec)


def recover_pub_keys_(
    msg_hash: Octets, sig: Union[Sig, Octets], ec: Curve = secp256r1
) -> List[Point]:
    """Return all the public keys recovered for recovery id 0 and 1.

    Recovery ids leading to an invalid ephemeral point are skipped.
    """
    sig = _sig_from(sig, ec)
    e = int_from_leftmost_bytes(msg_hash, sig.ec.p_size)

    keys: List[Point] = []
    for recovery_id in (0, 1):
        with contextlib.suppress(InvalidPointError):
            Q = _recover_pub_key_(recovery_id, e, sig.r, sig.s, sig.ec)
            if Q[1] != 0:
                keys.append(Q)
    return keys


def recover_pub_keys(
    msg: Octets,
    sig: Union[Sig, Octets],
    hf: HashF = sha256,
    ec: Curve = secp256r1,
) -> List[Point]:
    "Return all the public keys recovered for recovery id 0 and 1."
    msg_hash = hf(bytes_from_octets(msg)).digest()
    return recover_pub_keys_(msg_hash, sig, ec)


def recovery_id_(
    msg_hash: Octets,
    sig: Union[Sig, Octets],
    key: Union[Point, Octets],
    ec: Curve = secp256r1,
) -> int:
    """Return the recovery id (0 or 1) of the given public key.

    An error is raised if the public key cannot be recovered
    from the signature with any recovery id.
    """
    sig = _sig_from(sig, ec)
    Q = key if isinstance(key, tuple) else point_from_octets(key, sig.ec)
    e = int_from_leftmost_bytes(msg_hash, sig.ec.p_size)

    for recovery_id in (0, 1):
        with contextlib.suppress(InvalidPointError):
            if _recover_pub_key_(recovery_id, e, sig.r, sig.s, sig.ec) == Q:
                return recovery_id
    raise ECRecoveryRuntimeError("public key not recoverable from signature")


def _hex_from_point(Q: Point, ec: Curve) -> str:
    try:
        pub_key = bytes_from_point(Q, ec, compressed=False)
    except ECRecoveryValueError as err:
        err_msg = f"cannot encode the recovered public key: {err}"
        raise ArithmeticFailureError(err_msg) from err
    # strip the 0x04 uncompressed format identifier
    return pub_key[1:].hex()


@dataclass
class KeyRecoveryResult(DataClassJsonMixin):
    """Outcome of recover_public_key.

    On success public_key is the X||Y hex-string of the recovered key,
    without format identifier, and error_kind is None;
    on failure public_key is empty.
    """

    public_key: str = ""
    error_kind: Optional[ErrorKind] = None
    error_message: str = ""

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def from_error(cls, err: KeyRecoveryError) -> "KeyRecoveryResult":
        return cls(error_kind=err.kind, error_message=str(err))


def _recover_public_key(
    digest: Octets,
    r: Integer,
    s: Integer,
    recovery_id: int,
    curve: Union[str, Curve],
) -> str:
    recovery_id = canonical_recovery_id(recovery_id)

    if isinstance(curve, Curve):
        ec = curve
    else:
        try:
            ec = curve_from_name(curve)
        except ECRecoveryValueError as err:
            raise ArithmeticFailureError(str(err)) from err

    sig = Sig.from_integers(r, s, ec)
    try:
        e = int_from_leftmost_bytes(digest, ec.p_size)
    except (ValueError, TypeError) as err:
        raise ArithmeticFailureError(f"invalid digest: {err}") from err
    Q = _recover_pub_key_(recovery_id, e, sig.r, sig.s, ec)
    return _hex_from_point(Q, ec)


def recover_public_key(
    digest: Octets,
    r: Integer,
    s: Integer,
    recovery_id: int,
    curve: Union[str, Curve] = "secp256r1",
) -> KeyRecoveryResult:
    """Recover the public key that produced an ECDSA signature.

    r and s are usually hex-strings (odd lengths allowed),
    the recovery id must be in (0, 1, 27, 28),
    and the digest is truncated to the curve field size.

    Recovery failures are not raised:
    they are returned as KeyRecoveryResult error_kind and error_message.
    """
    try:
        pub_key = _recover_public_key(digest, r, s, recovery_id, curve)
    except KeyRecoveryError as err:
        _logger.debug("public key recovery failed: %s", err)
        return KeyRecoveryResult.from_error(err)
    return KeyRecoveryResult(public_key=pub_key)


def p256_key_recovery(
    data_hash: Octets, r: Integer, s: Integer, recovery_id: int
) -> KeyRecoveryResult:
    "Recover the secp256r1 public key that produced an ECDSA signature."
    return recover_public_key(data_hash, r, s, recovery_id, secp256r1)
