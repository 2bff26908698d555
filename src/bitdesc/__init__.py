__version__ = "0.1.0"

import logging
import sys
import typing

logging.TRACE = logging.DEBUG - 1
logging.addLevelName(logging.TRACE, "TRACE")


class Logger(logging.getLoggerClass()):
    def trace(self, msg, *args, **kwargs):
        if self.isEnabledFor(logging.TRACE):
            self._log(logging.TRACE, msg, args, **kwargs)


logging.setLoggerClass(Logger)


def init_logging(log_level: str):
    """
    Initialize logging with a StreamHandler set to log_level
    Args:
        log_level: str, log level
    """
    log = logging.getLogger(__name__)
    log.setLevel(logging.TRACE)  # set root logger to lowest level
    formatter = logging.Formatter("[%(asctime)s] %(levelname)s [%(name)s] %(message)s")
    sh = logging.StreamHandler()
    sh.setFormatter(formatter)
    sh.setLevel(getattr(logging, log_level.upper()))
    log.addHandler(sh)
    return log


def read_inputs(file_: typing.Optional[typing.IO] = None) -> typing.List[str]:
    """
    Read inputs from optional file or stdin, one per line

    Trailing newlines are stripped and empty lines are skipped. Other whitespace is
    kept, since it is significant to the validators.

    Args:
        file_: Optional[IO], optional file object - otherwise stdin is used
    Returns:
        list of input strings
    """
    lines = file_.read().splitlines() if file_ else sys.stdin.read().splitlines()
    return [line for line in lines if line]
