"""
Shared test setup.
"""

import os

# Quiet, file-free logging for the test run
os.environ.setdefault("ENV", "test")
