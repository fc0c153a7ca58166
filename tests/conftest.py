"""Root conftest — shared test configuration."""

import os

# Ensure tests never trigger real DNS lookups through the default settings
os.environ.setdefault("REPLTOPO_CANONICALIZE_IDENTITIES", "false")
os.environ.setdefault("REPLTOPO_LOG_FORMAT", "text")
