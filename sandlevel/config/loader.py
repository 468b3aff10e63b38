"""
sandlevel Configuration Loader

Loads ~/.sandlevel/config.yaml into a ConfigDocument, picks the active
profile and merges everything into the runtime Config.

The structured sandbox mode is resolved here, at merge time, from the raw
profile and document layers. Feature flags are merged in order:
registry defaults, then document `features:`, then profile `features:`.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from sandlevel.config import DEFAULT_CONFIG_PATH
from sandlevel.config.models import Config, ConfigDocument, ConfigProfile, Permissions
from sandlevel.features import Features
from sandlevel.sandbox.mode import resolve_mode

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SANDLEVEL_CONFIG"


class ConfigError(Exception):
    """Raised when configuration cannot be loaded or is invalid."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


def default_config_path() -> Path:
    """Config path from $SANDLEVEL_CONFIG, else ~/.sandlevel/config.yaml."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH


def parse_document(data: object, path: Optional[Path] = None) -> ConfigDocument:
    """Validate an already-parsed YAML value as a ConfigDocument."""
    if data is None:
        return ConfigDocument()
    if not isinstance(data, dict):
        raise ConfigError(
            f"expected a mapping at the top level, got {type(data).__name__}", path
        )
    try:
        return ConfigDocument.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"invalid configuration:\n{e}", path) from e


def load_document(path: Optional[Union[str, Path]] = None) -> ConfigDocument:
    """
    Load a ConfigDocument from YAML.

    A missing file is not an error and yields an empty document.

    Raises:
        ConfigError: if the file cannot be read or decoded as UTF-8,
            is not valid YAML, or does not match the schema.
    """
    path = Path(path) if path is not None else default_config_path()
    if not path.exists():
        logger.debug("No config at %s, using defaults", path)
        return ConfigDocument()

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read file: {e}", path) from e
    except UnicodeDecodeError as e:
        raise ConfigError(f"cannot decode file: {e}", path) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML: {e}", path) from e

    return parse_document(data, path)


def select_profile(
    document: ConfigDocument, name: Optional[str] = None
) -> ConfigProfile:
    """
    Pick the active profile.

    An explicit name must exist. Without one, the document's `profile:` key
    is used; a dangling default or no default yields an empty profile.
    """
    if name is not None:
        try:
            return document.profiles[name]
        except KeyError:
            known = ", ".join(sorted(document.profiles)) or "none defined"
            raise ConfigError(f"unknown profile {name!r} (known: {known})") from None

    default = document.profile
    if default is None:
        return ConfigProfile()
    if default not in document.profiles:
        logger.warning("Default profile %r is not defined; ignoring it", default)
        return ConfigProfile()
    return document.profiles[default]


def active_profile_name(
    document: ConfigDocument, name: Optional[str] = None
) -> Optional[str]:
    if name is not None:
        return name
    if document.profile in document.profiles:
        return document.profile
    return None


def build_config(document: ConfigDocument, profile_name: Optional[str] = None) -> Config:
    """Merge a document and its active profile into the runtime Config."""
    profile = select_profile(document, profile_name)
    mode = resolve_mode(document, profile)
    features = Features.from_layers(document.features, profile.features)
    return Config(
        permissions=Permissions(windows_sandbox_mode=mode),
        features=features,
        active_profile=active_profile_name(document, profile_name),
    )


def load_config(
    path: Optional[Union[str, Path]] = None, profile: Optional[str] = None
) -> Config:
    """Load config.yaml and merge it into a Config."""
    return build_config(load_document(path), profile)
