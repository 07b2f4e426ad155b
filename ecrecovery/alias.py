#!/usr/bin/env python3

# Copyright (C) 2023 The ecrecovery developers
#
# This file is part of ecrecovery. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecrecovery including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Type aliases for the public key recovery API.

Octets are bytes or hex-strings, Integer also accepts int.
Points exchanged with callers are affine (x, y) tuples,
while the curve arithmetic runs on python-ecdsa Jacobian points.
"""

from typing import Any, Callable, Tuple, Union

Octets = Union[bytes, str]

Integer = Union[bytes, str, int]

HashF = Callable[[], Any]

Point = Tuple[int, int]

# no affine point has y equal to zero on prime odd order subgroups,
# hence (x, 0) tuples can represent the infinity point
INF = 5, 0
