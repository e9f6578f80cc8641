from __future__ import annotations

from pathlib import Path
from typing import List

import aiofiles
import aiofiles.os

from .config import settings
from .frontmatter import extract_command_fields, parse_document
from .logging_utils import setup_logger
from .models import CommandRecord, CommandSource
from .security import is_valid_entry_name

COMMAND_SUFFIX = ".md"

logger = setup_logger("command_scanner", settings.log_level)


def namespaced(prefix: str, name: str) -> str:
    return f"{prefix}:{name}" if prefix else name


async def read_command(path: Path, name: str, source: CommandSource) -> CommandRecord:
    async with aiofiles.open(path, encoding="utf-8") as f:
        text = await f.read()
    description, argument_hint = extract_command_fields(parse_document(text).metadata)
    return CommandRecord(
        name=name,
        description=description,
        argument_hint=argument_hint,
        source=source,
        path=str(path),
    )


async def scan_directory(root: Path, source: CommandSource, prefix: str = "") -> List[CommandRecord]:
    """
    Recursively collect command documents under ``root``.

    Nested folders become namespace segments: ``git/commit.md`` is
    ``git:commit``. A missing root gives an empty list; unreadable files and
    bad entry names are logged and skipped. Never raises.

    Symlinks are not followed, so a link cycle cannot recurse forever.
    """
    commands: List[CommandRecord] = []

    try:
        if not await aiofiles.os.path.isdir(root):
            return commands

        with await aiofiles.os.scandir(root) as it:
            entries = sorted(it, key=lambda e: e.name)

        for entry in entries:
            if not is_valid_entry_name(entry.name):
                logger.warning(f"Skipping invalid entry name: {entry.name!r} in {root}")
                continue

            full_path = Path(root) / entry.name

            if entry.is_dir(follow_symlinks=False):
                commands.extend(
                    await scan_directory(full_path, source, namespaced(prefix, entry.name))
                )
            elif entry.is_file(follow_symlinks=False) and entry.name.endswith(COMMAND_SUFFIX):
                base_name = entry.name[: -len(COMMAND_SUFFIX)]
                try:
                    commands.append(
                        await read_command(full_path, namespaced(prefix, base_name), source)
                    )
                except Exception as e:
                    # A bad file only drops itself from the catalog
                    logger.warning(f"Failed to read {full_path}: {e}")
    except OSError as e:
        logger.error(f"Failed to scan directory {root}: {e}")

    return commands
