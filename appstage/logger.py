import logging
import sys

VERBOSE_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
DEFAULT_FORMAT = "[%(levelname)s] %(message)s"


def setup_logger(verbose: bool = False) -> None:
    package_logger = logging.getLogger("appstage")

    if package_logger.handlers:
        package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(fmt=VERBOSE_FORMAT if verbose else DEFAULT_FORMAT)
    )

    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    package_logger.addHandler(handler)
    package_logger.propagate = False
