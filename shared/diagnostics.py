import logging


class FatalError(Exception):
    """Setup failure that must abort the run before any output is written."""


class Diagnostics:
    """Explicit warn/fatal sink handed to the pipeline instead of a global logger."""

    def __init__(self, logger=None):
        self.logger = logger or logging.getLogger("galaxy")
        self.warnings = 0

    def warn(self, msg, *args):
        self.warnings += 1
        self.logger.warning(msg, *args)

    def fatal(self, msg, *args):
        """Log at CRITICAL and raise FatalError with the formatted message."""
        self.logger.critical(msg, *args)
        raise FatalError(msg % args if args else msg)
