"""Module-level constants for the tag vault server."""

import re
from pathlib import Path

# Configuration
CONFIG_ENV_VAR = "TAG_VAULT_CONFIG"
CONFIG_PATH = Path(__file__).parent.parent / "vaults.yaml"

# Plain-text tagging convention
BYTE_ORDER_MARK = "\ufeff"
TAG_PATTERN = re.compile(r"^#[a-zA-Z0-9-]+$")
SEPARATOR_PATTERN = re.compile(r"^-{3,}$")
DAILY_NOTE_PATTERN = re.compile(r"^([0-9]{4}-[0-9]{2}-[0-9]{2})\.md$")

# Documents considered part of a vault
NOTE_GLOB = "*.md"

# Logging
LOG_LEVEL = "INFO"
