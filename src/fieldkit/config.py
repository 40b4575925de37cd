"""Unified configuration loaded from .fieldkit.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from fieldkit.content.store import ContentStore
from fieldkit.fields.links import DEFAULT_SERVER_URL, LanguageEmbedding, PathLinkProvider
from fieldkit.fields.media import (
    DEFAULT_MEDIA_EXTENSION,
    DEFAULT_MEDIA_PREFIX,
    DEFAULT_MEDIA_ROOT,
    MediaLibraryUrlProvider,
)
from fieldkit.publishing.models import PublishMode, ReplicatorConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".fieldkit.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]
GLOBAL_CONFIG = Path.home() / ".config" / "fieldkit" / "config.toml"


class StoresConfig(BaseModel):
    """[stores] section."""

    directory: str = "./stores"
    source: str = "master"
    targets: list[str] = Field(default_factory=lambda: ["web"])

    @field_validator("targets", mode="before")
    @classmethod
    def _split_targets(cls, value: object) -> object:
        if isinstance(value, str):
            return [name.strip() for name in value.split(",") if name.strip()]
        return value


class LinksConfig(BaseModel):
    """[links] section."""

    server_url: str = DEFAULT_SERVER_URL
    language_embedding: LanguageEmbedding = LanguageEmbedding.NEVER
    default_locale: str = "en"


class MediaConfig(BaseModel):
    """[media] section."""

    prefix: str = DEFAULT_MEDIA_PREFIX
    extension: str = DEFAULT_MEDIA_EXTENSION
    media_root: str = DEFAULT_MEDIA_ROOT


class PublishingConfig(BaseModel):
    """[publishing] section."""

    mode: PublishMode = PublishMode.SINGLE_ITEM


class FieldkitConfig(BaseModel):
    """Top-level configuration model."""

    stores: StoresConfig = Field(default_factory=StoresConfig)
    links: LinksConfig = Field(default_factory=LinksConfig)
    media: MediaConfig = Field(default_factory=MediaConfig)
    publishing: PublishingConfig = Field(default_factory=PublishingConfig)

    @property
    def store_directory(self) -> Path:
        return Path(self.stores.directory)

    def open_store(self, name: str) -> ContentStore:
        """Open a named store from the configured directory."""
        return ContentStore.open(self.store_directory, name)

    def to_link_provider(self) -> PathLinkProvider:
        return PathLinkProvider(
            server_url=self.links.server_url,
            default_locale=self.links.default_locale,
            language_embedding=self.links.language_embedding,
        )

    def to_media_provider(self) -> MediaLibraryUrlProvider:
        return MediaLibraryUrlProvider(
            prefix=self.media.prefix,
            extension=self.media.extension,
            media_root=self.media.media_root,
        )

    def to_replicator_config(
        self,
        targets: list[str] | None = None,
        source: ContentStore | None = None,
    ) -> ReplicatorConfig:
        """Open the source store and the target stores named in config.

        Args:
            targets: Target store names overriding ``[stores] targets``.
            source: An already opened source store to use instead of
                opening ``[stores] source``.
        """
        names = targets if targets is not None else self.stores.targets
        return ReplicatorConfig(
            source=source if source is not None else self.open_store(self.stores.source),
            targets=tuple(self.open_store(name) for name in names),
        )


def load_config(path: str | Path | None = None) -> FieldkitConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .fieldkit.toml in CWD
    3. ~/.config/fieldkit/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged FieldkitConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        if not data and GLOBAL_CONFIG.exists():
            data = _load_toml(GLOBAL_CONFIG)
            logger.info("Loaded config from %s", GLOBAL_CONFIG)

    config = FieldkitConfig.model_validate(data) if data else FieldkitConfig()

    return _apply_env_vars(config)


def merge_cli_overrides(config: FieldkitConfig, **cli_kwargs: object) -> FieldkitConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "store_dir": ("stores", "directory"),
        "source": ("stores", "source"),
        "targets": ("stores", "targets"),
        "server_url": ("links", "server_url"),
        "default_locale": ("links", "default_locale"),
        "mode": ("publishing", "mode"),
    }

    for key, value in cli_kwargs.items():
        if value is None:
            continue
        if key in mapping:
            section, field = mapping[key]
            data[section][field] = value

    return FieldkitConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: FieldkitConfig) -> FieldkitConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "FIELDKIT_STORE_DIR": ("stores", "directory"),
        "FIELDKIT_SOURCE_STORE": ("stores", "source"),
        "FIELDKIT_TARGET_STORES": ("stores", "targets"),
        "FIELDKIT_SERVER_URL": ("links", "server_url"),
        "FIELDKIT_DEFAULT_LOCALE": ("links", "default_locale"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value:
            data[section][field] = value

    return FieldkitConfig.model_validate(data)
