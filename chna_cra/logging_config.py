"""Shared logging configuration.

``configure_logging()`` is called once from ``create_app()``. It is
idempotent: if the root logger already has handlers, it does nothing.
"""

import logging


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure the root logger with a console handler.

    Only configures if the root logger has no handlers (idempotent).
    """
    root = logging.getLogger()
    if root.handlers:
        return

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    root.setLevel(level)
