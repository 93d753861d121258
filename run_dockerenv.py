"""
Entry point for dockerenv when running from a source checkout.
"""
# Copyright (c) 2026 Yusoku Advisor Godo Kaisha (ゆうそくアドバイザー合同会社)
# Released under the MIT license
# https://opensource.org/licenses/MIT

import sys
from pathlib import Path

# Add src to path (dev mode only)
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / 'src'))

from dockerenv.cli import main


if __name__ == '__main__':
    sys.exit(main())
