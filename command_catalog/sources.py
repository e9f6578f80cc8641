from pathlib import Path
from typing import List, Protocol

import yaml
from pydantic import ValidationError

from .config import settings
from .logging_utils import setup_logger
from .models import PluginSource

PLUGIN_SOURCE_TYPE = "plugin"

logger = setup_logger("command_sources", settings.log_level)


class SourceStore(Protocol):
    """Read-only view of the configuration store that registers plugin directories."""

    def list_sources(self, source_type: str) -> List[PluginSource]:
        ...


class YamlSourceStore:
    """
    Configuration store backed by a YAML file.

    File format (a list; ``enabled`` defaults to true, ``type`` to "plugin"):

        - path: /opt/plugins/team
          priority: 10
        - path: ~/plugins/experimental
          priority: 20
          enabled: false

    A missing or unreadable file means "no sources"; malformed items are
    skipped.
    """

    def __init__(self, sources_file: Path):
        self.sources_file = Path(sources_file)

    def _load(self) -> List[PluginSource]:
        # Blocking read: SourceStore.list_sources is synchronous
        if not self.sources_file.exists():
            return []
        try:
            data = yaml.safe_load(self.sources_file.read_text(encoding="utf-8"))
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Failed to load plugin sources from {self.sources_file}: {e}")
            return []
        if not data:
            return []
        if not isinstance(data, list):
            logger.error(f"Plugin sources file {self.sources_file} must contain a list")
            return []

        sources = []
        for item in data:
            try:
                sources.append(PluginSource.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Ignoring malformed plugin source {item!r}: {e}")
        return sources

    def list_sources(self, source_type: str) -> List[PluginSource]:
        return [s for s in self._load() if s.type == source_type]


def get_enabled_plugin_sources(store: SourceStore) -> List[PluginSource]:
    """Enabled plugin sources, lowest ``priority`` first (ties keep store order)."""
    sources = [s for s in store.list_sources(PLUGIN_SOURCE_TYPE) if s.enabled]
    return sorted(sources, key=lambda s: s.priority)
