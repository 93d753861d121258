# Copyright (c) 2026 Yusoku Advisor Godo Kaisha (ゆうそくアドバイザー合同会社)
# Released under the MIT license
# https://opensource.org/licenses/MIT

"""Allows ``python -m dockerenv``."""

import sys

from dockerenv.cli import main

if __name__ == '__main__':
    sys.exit(main())
