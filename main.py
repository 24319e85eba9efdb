#!/usr/bin/env python3
"""nginx-insight - Entry point"""

import sys

from nginx_insight.cli import main


if __name__ == "__main__":
    sys.exit(main())
