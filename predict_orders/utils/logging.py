"""structlog setup for applications embedding the order builder.

The library itself only emits events through ``structlog.get_logger()``;
call ``configure_logging()`` once at startup to render them on the console
with level and timestamp.
"""

import structlog

_configured = False


def configure_logging() -> None:
    """Install the console processor chain used for order-builder events.

    Repeated calls are no-ops.
    """
    global _configured
    if _configured:
        return
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.ConsoleRenderer(),
        ]
    )
    _configured = True
