"""
Centralized Logging Configuration for the Dispute Assistant
"""
import os
import logging
import logging.handlers
from pathlib import Path

LOGGER_NAMESPACE = 'disputeassistant'


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes')


def setup_logging() -> logging.Logger:
    """
    Configure root logging handlers from environment variables

    File logging is on by default and rotates at LOG_FILE_MAX_SIZE bytes.
    Console logging is opt-in so the interactive console stays readable.
    """
    log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
    log_to_file = _env_flag('LOG_TO_FILE', 'true')
    log_to_console = _env_flag('LOG_TO_CONSOLE', 'false')
    log_file_path = Path(os.getenv('LOG_FILE_PATH', 'logs/dispute_assistant.log'))
    max_bytes = int(os.getenv('LOG_FILE_MAX_SIZE', str(10 * 1024 * 1024)))
    backup_count = int(os.getenv('LOG_FILE_BACKUP_COUNT', '5'))
    formatter = logging.Formatter(
        os.getenv('LOG_FORMAT', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    )

    handlers = []
    if log_to_file:
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file_path,
            maxBytes=max_bytes,
            backupCount=backup_count
        ))
    if log_to_console or not handlers:
        handlers.append(logging.StreamHandler())

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(log_level)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)

    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.info(f"Logging configured at level {log_level}")
    logger.info(f"Console logging: {'enabled' if log_to_console else 'disabled'}")
    if log_to_file:
        logger.info(f"Log file: {log_file_path}")
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the dispute assistant namespace"""
    return logging.getLogger(f'{LOGGER_NAMESPACE}.{name}')


_CONSOLE_PREFIXES = {
    'ERROR': 'ERROR',
    'WARNING': 'WARNING',
    'SUCCESS': 'SUCCESS',
    'AGENT': 'AGENT',
    'USER': 'YOU',
}


def console_print(message: str, level: str = 'INFO'):
    """
    Print a user-facing line to the console
    """
    prefix = _CONSOLE_PREFIXES.get(level.upper(), 'INFO')
    print(f"{prefix}: {message}")


_root_logger = None


def init_logging():
    """Initialize logging configuration once"""
    global _root_logger
    if _root_logger is None:
        _root_logger = setup_logging()
    return _root_logger
