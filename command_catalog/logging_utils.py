import logging
from typing import Optional, Sequence, Tuple


def setup_logger(name: str = "command_catalog", level: str = "INFO") -> logging.Logger:
    """Setup standardized logger for catalog operations with UTF-8 support."""
    logger = logging.getLogger(name)

    if not logger.handlers:  # Avoid duplicate handlers
        handler = logging.StreamHandler()
        # Command documents are often non-ASCII
        if hasattr(handler.stream, 'reconfigure'):
            handler.stream.reconfigure(encoding='utf-8')

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger


def log_catalog_summary(logger: logging.Logger,
                        project_path: Optional[str],
                        scanned: Sequence[Tuple[str, str, int]],
                        total: int,
                        duplicates: int,
                        duration_ms: float) -> None:
    """Log one structured line describing a catalog listing.

    ``scanned`` holds ``(source, root, record_count)`` triples in plan order.
    """
    log_data = {
        "project_path": project_path,
        "roots": [
            {"source": source, "root": root, "count": count}
            for source, root, count in scanned
        ],
        "commands": total,
        "duration_ms": round(duration_ms, 1),
    }

    # Only report shadowing when it happened
    if duplicates:
        log_data["shadowed"] = duplicates

    logger.info(f"Catalog listed: {log_data}")
