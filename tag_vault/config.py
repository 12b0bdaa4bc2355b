"""Configuration loading and vault registry."""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml

from tag_vault.constants import CONFIG_ENV_VAR, CONFIG_PATH
from tag_vault.data_models import VaultConfiguration, VaultMetadata

logger = logging.getLogger(__name__)


def resolve_config_path() -> Path:
    """Return the configuration file location, honouring ``TAG_VAULT_CONFIG``."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override and override.strip():
        return Path(override).expanduser()
    return CONFIG_PATH


def load_vault_configuration(config_path: Optional[Path] = None) -> VaultConfiguration:
    """Load and validate the vault configuration file.

    Args:
        config_path: Path to the YAML configuration file. Defaults to
            :func:`resolve_config_path`.

    Returns:
        A fully populated :class:`VaultConfiguration` containing normalized vault
        metadata and the configured default vault name.

    Raises:
        FileNotFoundError: If the configuration file is missing.
        ValueError: If the file exists but does not provide the expected structure
            (missing default, empty mapping, invalid entries, etc.).
    """
    config_path = config_path or resolve_config_path()
    if not config_path.exists():
        raise FileNotFoundError(f"Vault configuration file not found at {config_path}")

    try:
        raw_config = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Vault configuration at {config_path} is not valid YAML: {exc}") from exc
    if not isinstance(raw_config, dict):
        raise ValueError("Vault configuration must be a YAML mapping")

    vaults_section = raw_config.get("vaults")
    if not isinstance(vaults_section, dict) or not vaults_section:
        raise ValueError("Vault configuration must include a non-empty 'vaults' mapping")

    processed: dict[str, VaultMetadata] = {}
    for name, entry in vaults_section.items():
        if not isinstance(entry, dict):
            raise ValueError(f"Vault '{name}' must map to a dictionary of settings")

        raw_path = entry.get("path")
        if not isinstance(raw_path, str) or not raw_path.strip():
            raise ValueError(f"Vault '{name}' is missing a valid 'path' string")

        resolved_path = Path(raw_path).expanduser()
        if not resolved_path.is_absolute():
            resolved_path = config_path.parent / resolved_path
        resolved_path = resolved_path.resolve(strict=False)

        description = (entry.get("description") or "").strip()
        processed[name] = VaultMetadata(
            name=name,
            path=resolved_path,
            description=description,
            exists=resolved_path.is_dir(),
        )
        if not resolved_path.is_dir():
            logger.warning("Vault '%s' points at missing directory %s", name, resolved_path)

    default_vault = raw_config.get("default")
    if not isinstance(default_vault, str) or default_vault not in processed:
        raise ValueError("Vault configuration must specify a 'default' vault present in the mapping")

    return VaultConfiguration(default_vault=default_vault, vaults=processed)


@lru_cache(maxsize=1)
def get_vault_configuration() -> VaultConfiguration:
    """Load the configuration once and reuse it for the process lifetime."""
    configuration = load_vault_configuration()
    logger.info(
        "Loaded %d vault(s) from configuration; default is '%s'",
        len(configuration.vaults),
        configuration.default_vault,
    )
    return configuration
