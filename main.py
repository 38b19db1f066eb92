"""
Sentinel: TOTP Authenticator

Entry point for running the command-line interface from a source checkout.
"""

import sys

from sentinel.main import main

if __name__ == "__main__":
    sys.exit(main())
