#!/usr/bin/env python3

# Copyright (C) 2023 The ecrecovery developers
#
# This file is part of ecrecovery. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecrecovery including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Exception classes.

ECRecoveryValueError, ECRecoveryTypeError and ECRecoveryRuntimeError
only discriminate errors raised by ecrecovery from errors raised elsewhere
(e.g. by python-ecdsa); catching the builtin ValueError, TypeError
or RuntimeError is usually enough.

Public key recovery failures are further classified by ErrorKind:
each kind has its own exception class, all of them derived from
KeyRecoveryError, which formats the error message uniformly
as '<kind message>: <detail>'.
"""

from enum import Enum


class ECRecoveryValueError(ValueError):
    pass


class ECRecoveryTypeError(TypeError):
    pass


class ECRecoveryRuntimeError(RuntimeError):
    pass


class ErrorKind(Enum):
    "Public key recovery failure classes, valued with their message."

    INVALID_RECOVERY_ID = "invalid recovery id"
    INVALID_SIGNATURE = "invalid signature"
    INVALID_POINT = "invalid point"
    NO_INVERSE = "no modular inverse"
    ARITHMETIC_FAILURE = "arithmetic failure"


class KeyRecoveryError(Exception):
    "Base class of the public key recovery errors."

    kind: ErrorKind

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        err_msg = self.kind.value
        if detail:
            err_msg += f": {detail}"
        super().__init__(err_msg)


class InvalidRecoveryIdError(KeyRecoveryError, ECRecoveryValueError):
    kind = ErrorKind.INVALID_RECOVERY_ID


class InvalidSignatureError(KeyRecoveryError, ECRecoveryValueError):
    kind = ErrorKind.INVALID_SIGNATURE


class InvalidPointError(KeyRecoveryError, ECRecoveryValueError):
    kind = ErrorKind.INVALID_POINT


class NoInverseError(KeyRecoveryError, ECRecoveryValueError):
    kind = ErrorKind.NO_INVERSE


class ArithmeticFailureError(KeyRecoveryError, ECRecoveryRuntimeError):
    kind = ErrorKind.ARITHMETIC_FAILURE
