"""Configuration loading.

Environment variables:
- KBASE_CONFIG: path to a JSON file holding the site configuration
- KBASE_CONTENT_DIR: content root used when no config file is given
"""

import logging
import os
from pathlib import Path

from kbase.models.config import SiteConfig

logger = logging.getLogger(__name__)


def load_config() -> SiteConfig:
    """Build a fresh :class:`SiteConfig` from the environment."""
    config_path = os.environ.get("KBASE_CONFIG")
    if config_path:
        logger.debug("Loading configuration from %s", config_path)
        return SiteConfig.model_validate_json(Path(config_path).read_text(encoding="utf-8"))
    return SiteConfig(content_dir=os.environ.get("KBASE_CONTENT_DIR", "content"))


def get_config() -> SiteConfig:
    """FastAPI dependency returning the configuration for one request."""
    return load_config()
