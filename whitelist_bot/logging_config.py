import logging
import sys

# Third-party loggers that are chatty at INFO.
_NOISY = ("discord", "discord.client", "discord.gateway", "httpx", "uvicorn.access")


def setup_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Configure the ``whitelist`` logger once and return it.

    ``level`` may be a number or a name such as ``"DEBUG"``. Repeated calls
    return the same, already configured logger.
    """
    logger = logging.getLogger("whitelist")
    if logger.handlers:
        return logger
    if isinstance(level, str):
        level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
    logger.setLevel(level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    # Access lines come from our own middleware, keep uvicorn's quiet.
    for name in _NOISY:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    return logger
