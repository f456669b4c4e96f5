"""
Settings and seed files for the vending machine.

The settings live in a YAML file (vending_config.yaml by default). Anything the
file leaves out is taken from DEFAULT_CONFIG. The coins loaded into the machine
and the products on sale come from two plain text files:

    coins.txt       denomination,count        e.g. 25,40
    products.txt    id,name,price             e.g. 3,0.1uF Capacitor,0.50
"""

import copy
import logging
from pathlib import Path

import yaml

from vending_errors import InvalidArgument

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "vending_config.yaml"

DEFAULT_CONFIG = {
    'coins': {
        'scale': 2,
        'denominations': [5, 10, 25, 100, 200],
        'max_count': 2 ** 31 - 1,
    },
    'files': {
        'coins': 'coins.txt',
        'products': 'products.txt',
    },
    'logging': {
        'level': 'INFO',
    },
    'panel': {
        'dispense_delay': 0.5,
    },
}


def get_default_config():
    return copy.deepcopy(DEFAULT_CONFIG)


def load_config(path=None):
    """
    Read the settings file and fill in anything missing from the defaults.

    Args:
        path: Settings file to read. Defaults to vending_config.yaml next to
            this module. A missing file gives the default settings.

    Returns:
        Dictionary of settings. File paths under 'files' are made absolute,
        relative to the folder holding the settings file.
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    config = get_default_config()

    if config_path.exists():
        with open(config_path, 'r') as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise InvalidArgument(f"Settings file {config_path} must hold a mapping.")
        for section, values in loaded.items():
            if isinstance(values, dict) and isinstance(config.get(section), dict):
                config[section].update(values)
            else:
                config[section] = values
    else:
        logger.warning(f"Settings file {config_path} not found, using defaults.")

    is_valid, message = validate_config(config)
    if not is_valid:
        raise InvalidArgument(f"Invalid settings in {config_path}: {message}")

    base = config_path.parent
    for name, file_path in config['files'].items():
        config['files'][name] = str(base / file_path)
    return config


def validate_config(config):
    """
    Validate that the settings have the required fields.

    Returns:
        Tuple of (is_valid, error_message)
    """
    for key in ('coins', 'files', 'logging', 'panel'):
        if not isinstance(config.get(key), dict):
            return False, f"Missing required configuration section: {key}"

    coins = config['coins']
    scale = coins.get('scale')
    if not isinstance(scale, int) or isinstance(scale, bool) or scale < 0:
        return False, "coins.scale must be a non-negative integer"

    denominations = coins.get('denominations')
    if not isinstance(denominations, list) or not denominations:
        return False, "coins.denominations must be a non-empty list"
    for denomination in denominations:
        if not isinstance(denomination, int) or isinstance(denomination, bool) or denomination <= 0:
            return False, f"Invalid denomination: {denomination!r}"
    if len(set(denominations)) != len(denominations):
        return False, "coins.denominations must not repeat a denomination"

    max_count = coins.get('max_count')
    if not isinstance(max_count, int) or isinstance(max_count, bool) or max_count < 0:
        return False, "coins.max_count must be a non-negative integer"

    for name in ('coins', 'products'):
        if not config['files'].get(name):
            return False, f"Missing required field in files section: {name}"

    level = config['logging'].get('level')
    if not isinstance(level, str) or not isinstance(logging.getLevelName(level.upper()), int):
        return False, f"Unknown logging level: {level!r}"

    delay = config['panel'].get('dispense_delay')
    if not isinstance(delay, (int, float)) or delay < 0:
        return False, "panel.dispense_delay must be a non-negative number"

    return True, ""


def read_coins(path):
    """
    Read the coins to load into the machine.

    Returns a list of (denomination, count). Lines that do not hold two whole
    numbers, or whose denomination is not positive, are skipped.
    """
    coins = []
    with open(path, 'r') as f:
        for line_no, line in enumerate(f, 1):
            details = [part.strip() for part in line.split(',')]
            if len(details) != 2:
                continue
            try:
                denomination, count = int(details[0]), int(details[1])
            except ValueError:
                logger.warning(f"{path}:{line_no}: skipping unreadable coin line {line.strip()!r}")
                continue
            if denomination > 0:
                coins.append((denomination, count))
    return coins


def read_products(path):
    """
    Read the products on sale.

    Returns a list of (product_id, name, price) with the price as a string so
    no precision is lost. Reading stops at the first product line whose id or
    price is not a number.
    """
    products = []
    with open(path, 'r') as f:
        for line_no, line in enumerate(f, 1):
            details = [part.strip() for part in line.split(',')]
            if len(details) != 3:
                continue
            try:
                product_id = int(details[0])
                float(details[2])
            except ValueError:
                logger.warning(f"{path}:{line_no}: stopping at unreadable product line {line.strip()!r}")
                break
            products.append((product_id, details[1], details[2]))
    return products
