"""Logging configuration utilities."""

from typing import Dict, Any

from ci_status.settings import get_settings


def get_logging_config() -> Dict[str, Any]:
    """
    Get logging configuration dictionary.

    Returns:
        Logging configuration for dictConfig
    """
    settings = get_settings()
    formatter = "json" if settings.log_format == "json" else "standard"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s" if settings.log_format == "json" else settings.log_format,
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "class": "pythonjsonlogger.json.JsonFormatter",
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": settings.log_level,
                "formatter": formatter,
                "stream": "ext://sys.stderr",
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": settings.log_level,
                "formatter": formatter,
                "filename": f"{settings.log_dir}/ci_status.log",
                "maxBytes": 10485760,
                "backupCount": 10,
            },
        },
        "loggers": {
            "ci_status": {
                "level": settings.log_level,
                "handlers": ["console", "file"],
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
        "root": {
            "level": settings.log_level,
            "handlers": ["console"],
        },
    }


def setup_logging():
    """Setup logging configuration."""
    import logging.config
    from pathlib import Path

    Path(get_settings().log_dir).mkdir(parents=True, exist_ok=True)

    config = get_logging_config()
    logging.config.dictConfig(config)

    logger = logging.getLogger("ci_status")
    logger.debug("Logging configured successfully")
