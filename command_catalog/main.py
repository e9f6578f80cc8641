from __future__ import annotations

from pathlib import Path
from datetime import datetime
from typing import Literal

from fastapi import FastAPI, Depends, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, PlainTextResponse

from .catalog import CommandCatalog
from .config import settings
from .models import CommandContent, CommandList
from .presentation.html_renderer import HtmlRenderer
from .presentation.presenters import create_presenter
from .security import PathTraversalError, require_api_key
from .sources import YamlSourceStore

VERSION = "0.1.0"

app = FastAPI(title="Command Catalog API", version=VERSION)

origins = (
    [o.strip() for o in settings.cors_origins.split(",")]
    if getattr(settings, "cors_origins", None)
    else ["*"]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Home and store location are resolved once, here
CATALOG = CommandCatalog(
    home_dir=Path(settings.home_dir).expanduser(),
    source_store=YamlSourceStore(Path(settings.sources_file).expanduser()),
)

OutputFormat = Literal["json", "markdown", "html"]


def _render(markdown_text: str, output_format: OutputFormat, title: str) -> Response:
    if output_format == "html":
        return HTMLResponse(HtmlRenderer().render(markdown_text, title=title))
    return PlainTextResponse(markdown_text, media_type="text/markdown; charset=utf-8")


@app.get("/health")
def health(response: Response):
    response.headers["Cache-Control"] = "no-store"
    return {
        "status": "ok",
        "service": "command-catalog",
        "version": VERSION,
        "time": datetime.now().astimezone().isoformat()
    }


@app.get("/commands", dependencies=[Depends(require_api_key)], response_model=CommandList)
async def list_commands(
    project_path: str | None = Query(default=None, description="Project root; adds <project>/.claude/commands"),
    format: OutputFormat = Query(default="json"),
):
    commands = await CATALOG.list_commands(project_path)
    if format == "json":
        return CommandList(commands=commands)

    md = create_presenter("commands").to_markdown(commands, project_path or "")
    return _render(md, format, "Commands")


@app.get("/commands/content", dependencies=[Depends(require_api_key)], response_model=CommandContent)
async def command_content(
    path: str = Query(..., min_length=1, description="Absolute path from a /commands record"),
    format: OutputFormat = Query(default="json"),
):
    try:
        result = await CATALOG.get_command_content(path)
    except PathTraversalError as e:
        raise HTTPException(400, detail=str(e))

    if format == "json":
        return result

    md = create_presenter("content").to_markdown(result.content, path)
    return _render(md, format, Path(path).stem or "Command")
