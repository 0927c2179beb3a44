import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the ``article_api`` logger hierarchy with a single stdout
    handler.  Safe to call more than once; existing handlers are replaced.
    """
    logger = logging.getLogger("article_api")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    logger.addHandler(handler)
    logger.propagate = False
