"""Logging configuration and setup."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict


def setup_logger(config: Dict) -> logging.Logger:
    """Initialize logging with file and console handlers.

    Console output goes to stderr so JSON written to stdout stays clean.

    Args:
        config: Configuration dictionary with 'logging' section

    Returns:
        Configured root logger
    """
    log_config = config.get('logging', {}) or {}
    level_name = str(log_config.get('level', 'INFO')).upper()
    log_level = getattr(logging, level_name, logging.INFO)
    log_file = log_config.get('file', 'logs/photo_metadata.log')

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Root logger
    logger = logging.getLogger()
    logger.setLevel(log_level)
    logger.handlers.clear()

    # File handler with rotation (empty path disables it)
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        max_bytes = int(log_config.get('max_bytes', 10485760))  # 10MB
        backup_count = int(log_config.get('backup_count', 5))
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        logger.addHandler(file_handler)

    if log_config.get('console_output', True):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        console_handler.setLevel(log_level)
        logger.addHandler(console_handler)

    logger.info("="*60)
    logger.info("Photo Metadata Editor - Session Start")
    logger.info("="*60)
    logger.info(f"Log level: {level_name}")
    logger.info(f"Log file: {log_file or '(disabled)'}")

    return logger
