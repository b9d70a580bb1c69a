import logging
from logging import handlers
from queue import Queue

import sys

# all loggers created through newLogger() live under this name
ROOT_LOGGER = "skyalchemy"

# one step below DEBUG; enabled with -vv
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

__logging_queue = None # type: Queue
__listener = None # type: handlers.QueueListener

_detailed_format = '[{asctime}.{msecs:03.0f}] {levelname:<8} {name}: {message}'


def level_for_verbosity(verbose):
    """
    Translate the number of times -v was passed into a log level.

    :param int verbose:
    :return: INFO for 0, DEBUG for 1, TRACE for anything higher
    """
    if verbose <= 0:
        return logging.INFO
    if verbose == 1:
        return logging.DEBUG
    return TRACE


def setupLogListener(level=logging.INFO, log_file=None):
    """
    Create the logging queue and start the listener thread that feeds
    it to the console (and optionally a log file).

    :param int level: level for the package logger
    :param str log_file: if given, also write records to this file,
        truncating it first
    """
    global __logging_queue
    global __listener

    if __listener is not None:
        stop_listener()

    q = Queue()

    detailed_formatter = logging.Formatter(_detailed_format,
                                           datefmt='%H:%M:%S',
                                           style='{')

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(detailed_formatter)
    out_handlers = [console_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w',
                                           encoding='utf-8')
        file_handler.setFormatter(detailed_formatter)
        out_handlers.append(file_handler)

    q_listener = handlers.QueueListener(q, *out_handlers)

    __logging_queue = q
    __listener = q_listener

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    for h in [h for h in root.handlers
              if isinstance(h, handlers.QueueHandler)]:
        root.removeHandler(h)
    root.addHandler(handlers.QueueHandler(q))

    q_listener.start()


def newLogger(name, level=None):
    """
    Create and return a new logger connected to the main logging queue.

    :param name: Name (preferably of the calling module) that will show
        in the log records. Names outside the package namespace are
        moved under it so the queue handler picks them up.
    :param str level: optional log message level for just this logger
    :return: logger object
    """

    if __listener is None:
        setupLogListener()

    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = ROOT_LOGGER + "." + name

    logger = logging.getLogger(name)

    if level is not None:
        try:
            logger.setLevel(level.upper() if isinstance(level, str)
                            else level)
        except ValueError:
            pass # let it inherit from the package logger

    return logger


def __lshift(caller, value):
    """
    Overload the << op to allow a shortcut to debug() calls:

    logger << "Here's your problem: " + str(thisiswrong)

    ==

    logger.debug("Here's your problem: {}".format(thisiswrong))

    :param value: the message to send
    """
    # stacklevel=2 so the record points at the caller, not this function
    caller.debug(value, stacklevel=2)

    return caller

# it has to be set on the class, not the instance
setattr(logging.Logger, "__lshift__", __lshift)  # add << overload


def trace(logger, msg, *args):
    logger.log(TRACE, msg, *args, stacklevel=2)


def stop_listener():
    """Flush everything still queued and stop the listener thread."""
    global __listener
    if __listener is not None:
        __listener.stop()
        __listener = None
