"""Root conftest — shared test configuration."""

import os

# Keep test output quiet and free of JSON log noise
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_FORMAT", "text")
