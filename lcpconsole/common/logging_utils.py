"""
Console log output: one stream handler on the ``lcpconsole`` logger tree.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logger(logger: logging.Logger, log_level: int) -> None:
    """Attach the console stream handler to ``logger`` once and set its level.

    Calling it again, as every ConfigLoader does, only changes the level.
    Records do not propagate so uvicorn's root handler does not repeat them.
    """
    logger.setLevel(log_level)
    logger.propagate = False
    for handler in logger.handlers:
        handler.setLevel(log_level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
