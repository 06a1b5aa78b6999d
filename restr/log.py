"""

    restr.log -- structured logging
    ===============================

    Engine modules log through :func:`get_logger`; applications call
    :func:`configure_logging` once at startup to choose level and rendering.

"""

import logging
import sys

import structlog

__all__ = ('get_logger', 'configure_logging')

def configure_logging(level='info', json=True, stream=None):
    """ Configure structlog on top of stdlib logging

    :param level:
        name of the stdlib logging level
    :param json:
        render events as JSON lines, otherwise as console key=value pairs
    """
    renderer = (structlog.processors.JSONRenderer() if json
        else structlog.dev.ConsoleRenderer(colors=False))
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt='iso'),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        format='%(message)s',
        stream=stream or sys.stdout,
        level=getattr(logging, level.upper()),
    )

def get_logger(name):
    return structlog.get_logger(name)
