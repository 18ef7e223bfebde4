import copy
import logging
import os

import yaml

from release_tracker.constants import CONFIG_DIR, CONFIG_FILE, DEFAULT_SETTINGS
from release_tracker.exceptions import ValidationException

# Retrieve main logger
logger = logging.getLogger("main")

# Cache variable
_cached_settings = None


def merge_settings(overrides):
    """Deep merge each section of `overrides` over the defaults"""
    merged_settings = copy.deepcopy(DEFAULT_SETTINGS)
    for section, values in (overrides or {}).items():
        if isinstance(values, dict) and isinstance(merged_settings.get(section), dict):
            merged_settings[section].update(values)
        else:
            merged_settings[section] = values
    return merged_settings


def load_settings(force=False, config_file=CONFIG_FILE):
    global _cached_settings

    if _cached_settings and not force:
        return _cached_settings

    if os.path.exists(config_file):
        logger.debug(f"Reading configuration file: {config_file}")
        with open(config_file, "r") as yaml_file:
            settings = merge_settings(yaml.safe_load(yaml_file) or {})
    else:
        settings = copy.deepcopy(DEFAULT_SETTINGS)
        os.makedirs(os.path.dirname(config_file) or CONFIG_DIR, exist_ok=True)
        with open(config_file, "w") as yaml_file:
            yaml.dump(settings, yaml_file)
        logger.info(f"Wrote default configuration to {config_file}")

    api_key = os.environ.get("RAWG_API_KEY")
    if api_key:
        settings["catalog"]["api_key"] = api_key

    _cached_settings = settings
    return settings


def verify_catalog_settings(catalog):
    """Validate the catalog section used by the sync job, raising on the first bad value"""
    for field in ("page_size", "lookback_days", "timeout", "max_pages"):
        value = catalog.get(field)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValidationException(f"catalog.{field} must be a positive integer, got {value!r}")

    mature_tags = catalog.get("mature_tags")
    if not isinstance(mature_tags, list) or not all(isinstance(t, str) for t in mature_tags):
        raise ValidationException("catalog.mature_tags must be a list of strings")

    if not catalog.get("api_url"):
        raise ValidationException("catalog.api_url is required")

    return catalog

