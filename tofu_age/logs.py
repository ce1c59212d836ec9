"""
Logging setup for the command line interface.

Stdout carries the protocol, so logs are written to stderr and, when DEBUG is
enabled, appended to a file in the working directory.
"""

import datetime
import logging
import signal
import sys
import typing

import click

DEBUG_LOG_FILE = 'tofu-age-debug.log'
FORMAT = '[%(asctime)s] [%(levelname)s] %(message)s'
DATE_FORMAT = '%m/%d/%Y, %H:%M:%S'

LEVELS = {
    'error': logging.ERROR,
    'warn': logging.WARNING,
    'info': logging.INFO,
    'debug': logging.DEBUG,
}

COLOURS = {
    logging.ERROR: 'red',
    logging.WARNING: 'yellow',
    logging.INFO: 'cyan',
    logging.DEBUG: 'magenta',
}


class ColourFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return click.style(super().format(record), fg=COLOURS.get(record.levelno))


def is_debug(environ: typing.Mapping[str, str]) -> bool:
    return environ.get('DEBUG') in ('true', '1')


def level(environ: typing.Mapping[str, str]) -> int:
    """DEBUG always enables debug lines, otherwise LOG_LEVEL or info."""
    if is_debug(environ):
        return logging.DEBUG
    return LEVELS.get(environ.get('LOG_LEVEL', ''), logging.INFO)


def file_handler(path: str) -> logging.FileHandler:
    handler = logging.FileHandler(path, mode='a', encoding='utf-8')
    timestamp = datetime.datetime.now().strftime(DATE_FORMAT)
    handler.stream.write(f"{'-' * (len(timestamp) + 2)}\n[{timestamp}]\n")
    handler.setFormatter(logging.Formatter(FORMAT, DATE_FORMAT))
    return handler


def shutdown(signum: int, frame: typing.Any) -> None:
    logging.shutdown()
    sys.exit(128 + signum)


def configure(environ: typing.Mapping[str, str]) -> logging.Logger:
    logger = logging.getLogger(__package__)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stderr = logging.StreamHandler(sys.stderr)
    stderr.setFormatter(ColourFormatter(FORMAT, DATE_FORMAT))
    logger.addHandler(stderr)

    if is_debug(environ):
        logger.addHandler(file_handler(DEBUG_LOG_FILE))

    logger.setLevel(level(environ))

    for signum in (signal.SIGINT, signal.SIGTERM):
        signal.signal(signum, shutdown)

    return logger
