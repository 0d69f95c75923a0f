# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import copy
import logging
import sys


class Colours:
    RESET_ALL = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'


_level_colours = {
    logging.DEBUG: Colours.BLUE,
    logging.INFO: Colours.GREEN,
    logging.WARNING: Colours.YELLOW,
    logging.ERROR: Colours.RED,
    logging.CRITICAL: Colours.RED,
}


class LevelColourFormatter(logging.Formatter):
    '''
    exposes `%(levelprefix)s` to format-strings: the record's level-name, coloured if the output
    stream is a tty.
    '''
    def __init__(
        self,
        fmt: str,
        stream=None,
    ):
        super().__init__(fmt=fmt)
        self.stream = stream or sys.stderr

    def levelprefix(self, record: logging.LogRecord) -> str:
        if not self.stream.isatty():
            return record.levelname

        if not (colour := _level_colours.get(record.levelno)):
            return record.levelname

        return f'{Colours.BOLD}{colour}{record.levelname}{Colours.RESET_ALL}'

    def formatMessage(self, record):
        record = copy.copy(record)
        record.levelprefix = self.levelprefix(record)
        return super().formatMessage(record)


def default_fmt_string() -> str:
    return '%(asctime)s [%(levelprefix)s] %(name)s: %(message)s'


def configure_default_logging(
    level: int=logging.INFO,
    stream=None,
):
    stream = stream or sys.stderr

    # make sure to have a clean root logger (in case setup is called multiple times)
    for handler in list(logging.root.handlers):
        logging.root.removeHandler(handler)
        handler.close()

    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(LevelColourFormatter(fmt=default_fmt_string(), stream=stream))

    logging.root.addHandler(handler)
    logging.root.setLevel(level)

    # both too verbose ...
    logging.getLogger('github3').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
