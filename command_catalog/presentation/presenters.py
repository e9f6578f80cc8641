"""
Presenters for the command catalog
Convert API responses to Markdown format for HTML display
"""

from __future__ import annotations

from typing import Dict, List

from ..models import CommandRecord

SOURCE_LABELS = {
    "project": "Project",
    "user": "User",
    "custom": "Plugin",
}


class BasePresenter:
    """Base presenter with common formatting utilities"""

    def escape_markdown(self, text: str) -> str:
        """Escape markdown special characters"""
        if not text:
            return ""

        chars_to_escape = ['\\', '*', '_', '`', '[', ']', '(', ')', '#', '+', '-', '.', '!', '|']
        for char in chars_to_escape:
            text = text.replace(char, f'\\{char}')

        return text


class CommandListPresenter(BasePresenter):
    """Convert a merged catalog to Markdown"""

    def to_markdown(self, commands: List[CommandRecord], project_path: str = "") -> str:
        """One table per source, in precedence order"""
        header = f"## Commands ({len(commands)})"
        if project_path:
            header += f" - `{project_path}`"

        if not commands:
            return f"{header}\n\n**No commands found.**"

        grouped: Dict[str, List[CommandRecord]] = {}
        for command in commands:
            grouped.setdefault(command.source, []).append(command)

        markdown = [header, ""]
        for source, label in SOURCE_LABELS.items():
            group = grouped.get(source)
            if not group:
                continue

            markdown.extend([
                f"### {label}",
                "",
                "| Command | Arguments | Description |",
                "|---------|-----------|-------------|",
            ])
            for command in group:
                hint = self.escape_markdown(command.argument_hint or "")
                description = self.escape_markdown(command.description.replace('\n', ' '))
                markdown.append(f"| `/{command.name}` | {hint} | {description} |")
            markdown.append("")

        return "\n".join(markdown)


class CommandContentPresenter(BasePresenter):
    """Convert command body to Markdown"""

    def to_markdown(self, content: str, path: str = "") -> str:
        filename = path.replace('\\', '/').split('/')[-1] if path else ""
        if filename.endswith('.md'):
            filename = filename[:-3]

        header = f"## {self.escape_markdown(filename)}" if filename else "## Command"

        if not content:
            return f"{header}\n\n**No content available.**"

        markdown = [header, ""]
        if path:
            markdown.append(f"**Path:** `{path}`")
            markdown.append("")

        # Body is already markdown
        markdown.append("---")
        markdown.append("")
        markdown.append(content)

        return "\n".join(markdown)


def create_presenter(content_type: str) -> BasePresenter:
    """Create appropriate presenter for content type"""
    presenters = {
        'commands': CommandListPresenter(),
        'content': CommandContentPresenter(),
    }

    presenter = presenters.get(content_type)
    if presenter is None:
        raise ValueError(f"Unknown content type: {content_type}")
    return presenter
