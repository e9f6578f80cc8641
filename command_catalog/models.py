from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional

CommandSource = Literal["user", "project", "custom"]


class CommandRecord(BaseModel):
    """One discovered command document."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str = ""
    argument_hint: Optional[str] = Field(default=None, alias="argumentHint")
    source: CommandSource
    path: str


class CommandList(BaseModel):
    commands: List[CommandRecord]


class CommandContent(BaseModel):
    content: str


class PluginSource(BaseModel):
    path: str
    priority: int = 0
    enabled: bool = True
    type: str = "plugin"
