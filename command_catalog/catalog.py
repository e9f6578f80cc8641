from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

import aiofiles

from .config import settings
from .frontmatter import parse_document
from .logging_utils import log_catalog_summary, setup_logger
from .models import CommandContent, CommandRecord, CommandSource, PluginSource
from .scanner import scan_directory
from .security import ensure_safe_path
from .sources import SourceStore, get_enabled_plugin_sources

CLAUDE_DIR = ".claude"
COMMANDS_DIR = "commands"

logger = setup_logger("command_catalog", settings.log_level)


@dataclass(frozen=True)
class ScanTarget:
    root: Path
    source: CommandSource


def build_scan_plan(
    home_dir: Path,
    plugin_sources: Iterable[PluginSource],
    project_path: Optional[str] = None,
) -> List[ScanTarget]:
    """Roots to scan, highest precedence first: project, user, then plugins."""
    plan = []
    if project_path:
        plan.append(ScanTarget(Path(project_path) / CLAUDE_DIR / COMMANDS_DIR, "project"))
    plan.append(ScanTarget(Path(home_dir) / CLAUDE_DIR / COMMANDS_DIR, "user"))
    for source in plugin_sources:
        plan.append(ScanTarget(Path(source.path).expanduser() / COMMANDS_DIR, "custom"))
    return plan


def merge_commands(results: Iterable[List[CommandRecord]]) -> List[CommandRecord]:
    """Flatten per-root results in order, keeping the first record for each name."""
    seen = set()
    commands = []
    for records in results:
        for command in records:
            if command.name not in seen:
                seen.add(command.name)
                commands.append(command)
    return commands


@dataclass(frozen=True)
class CommandCatalog:
    """Merges command documents from the project, the user and plugin sources.

    Nothing is cached: every call reads the filesystem and the source store
    again.
    """

    home_dir: Path
    source_store: SourceStore

    def _plugin_sources(self) -> List[PluginSource]:
        try:
            return get_enabled_plugin_sources(self.source_store)
        except Exception as e:
            # The store is external; a broken one must not hide local commands
            logger.error(f"Failed to read plugin sources: {e}")
            return []

    async def list_commands(self, project_path: Optional[str] = None) -> List[CommandRecord]:
        start_time = time.time()

        plan = build_scan_plan(self.home_dir, self._plugin_sources(), project_path)
        results = await asyncio.gather(
            *(scan_directory(target.root, target.source) for target in plan)
        )
        commands = merge_commands(results)

        found = sum(len(r) for r in results)
        log_catalog_summary(
            logger,
            project_path,
            [(t.source, str(t.root), len(r)) for t, r in zip(plan, results)],
            total=len(commands),
            duplicates=found - len(commands),
            duration_ms=(time.time() - start_time) * 1000,
        )
        return commands

    async def get_command_content(self, path: str) -> CommandContent:
        """Body of one command document, metadata stripped.

        Raises ``PathTraversalError`` for paths containing ``..``; any read
        or parse failure yields empty content.
        """
        ensure_safe_path(path)
        try:
            async with aiofiles.open(path, encoding="utf-8") as f:
                text = await f.read()
            return CommandContent(content=parse_document(text).body.strip())
        except Exception as e:
            logger.error(f"Failed to read command content {path}: {e}")
            return CommandContent(content="")
