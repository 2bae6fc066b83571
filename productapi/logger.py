# productapi/logger.py
import logging

FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once for the server process.

    Uvicorn keeps its own access/error loggers; everything under
    ``productapi`` goes through the root handler set here.
    """
    logging.basicConfig(level=level, format=FORMAT)
    logging.getLogger("productapi").setLevel(level)
