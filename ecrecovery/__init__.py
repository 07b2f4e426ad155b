#!/usr/bin/env python3

# Copyright (C) 2023 The ecrecovery developers
#
# This file is part of ecrecovery. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of ecrecovery including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"__init__ module for the ecrecovery package."

name = "ecrecovery"
__version__ = "2023.6.1"
__author__ = "The ecrecovery developers"
__author_email__ = "devs@ecrecovery.org"
__copyright__ = "Copyright (C) 2023 The ecrecovery developers"
__license__ = "MIT License"
