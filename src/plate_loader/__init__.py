"""plate-loader: offline split-based workout logger."""

from loguru import logger

__version__ = "0.1.0"

# Library modules stay quiet until the CLI (or the embedding app) enables them.
logger.disable("plate_loader")
