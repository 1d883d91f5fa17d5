"""Global pytest configuration."""

import os

# Tests run against the in-memory store unless a fixture builds a SQL one
os.environ.pop("DATABASE_URL", None)
os.environ.pop("REDIS_URL", None)
