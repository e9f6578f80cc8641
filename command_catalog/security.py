from fastapi import Header, HTTPException
from .config import settings


class PathTraversalError(ValueError):
    """A requested path tries to climb out of its directory."""


def require_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")):
    if not settings.api_key:
        return
    if x_api_key != settings.api_key:
        raise HTTPException(status_code=401, detail="Invalid API key")


def is_valid_entry_name(name: str) -> bool:
    return ".." not in name and "/" not in name and "\\" not in name


def ensure_safe_path(path: str) -> str:
    if ".." in path:
        raise PathTraversalError("Invalid path")
    return path
