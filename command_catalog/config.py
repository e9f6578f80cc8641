from __future__ import annotations

import os
from pathlib import Path
from dotenv import load_dotenv
from pydantic import BaseModel

# Load environment variables from .env (if present)
load_dotenv()


class Settings(BaseModel):
    # Home directory holding .claude/commands (user-level commands)
    home_dir: str = os.getenv("COMMANDS_HOME_DIR", str(Path.home()))

    # YAML file listing plugin sources ({path, priority, enabled, type})
    sources_file: str = os.getenv(
        "PLUGIN_SOURCES_FILE",
        str(Path.home() / ".config" / "command-catalog" / "sources.yml"),
    )

    # API key for this FastAPI server (sent via X-API-Key header)
    api_key: str = os.getenv("COMMAND_CATALOG_API_KEY", "")

    # CORS origins (comma-separated or "*")
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # HTML output ("light" or "dark")
    css_theme: str = os.getenv("CSS_THEME", "light")
    html_font_size: str = os.getenv("HTML_FONT_SIZE", "16px")
    html_max_width: str = os.getenv("HTML_MAX_WIDTH", "860px")


settings = Settings()
