import logging
import os
import sys
from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()

logger = logging.getLogger("movie_service")  # shared by every module of the service

if not logger.hasHandlers():  # avoid duplicate handlers when imported twice
    logger.setLevel(LOG_LEVEL)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger.addHandler(handler)

logger.propagate = False
