"""
Logging setup for the Sigflow command line.

Modules log through ``logging.getLogger(__name__)``; everything below the
``Sigflow`` logger goes to stderr and to one log file per run. Reports printed
by the CLI stay on stdout.
"""
import sys
import logging
from pathlib import Path

DEFAULT_LOG_DIR = Path.home() / '.sigflow' / 'logs'
DEFAULT_LOG_FILENAME = 'sigflow.log'

PLAIN_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEV_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'


def setup_logging(dev_mode=False, log_dir=None, log_filename=None):
    """
    Attach a stderr handler and a file handler to the ``Sigflow`` logger.

    Calling it again replaces the handlers of the previous call. The log file
    is overwritten on every run.

    Args:
        dev_mode (bool): DEBUG output with file/line information instead of INFO.
        log_dir (Path, optional): Defaults to ~/.sigflow/logs/
        log_filename (str, optional): Defaults to 'sigflow.log'

    Returns:
        logging.Logger: The configured ``Sigflow`` logger
    """
    logger = logging.getLogger('Sigflow')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level = logging.DEBUG if dev_mode else logging.INFO
    logger.setLevel(level)
    formatter = logging.Formatter(DEV_FORMAT if dev_mode else PLAIN_FORMAT)

    log_dir = Path(log_dir) if log_dir else DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file_path = log_dir / (log_filename or DEFAULT_LOG_FILENAME)

    for handler in (logging.StreamHandler(sys.stderr), logging.FileHandler(log_file_path, mode='w')):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info(f"Sigflow logging initialized in {'DEVELOPMENT' if dev_mode else 'PRODUCTION'} mode")
    logger.debug(f"Log file: {log_file_path}")
    return logger
