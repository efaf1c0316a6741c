import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# --- Base Directories ---
CONFIG_DIR = Path(os.environ.get('XDG_CONFIG_HOME', Path.home() / '.config')) / 'xdebug-toolkit'
LOG_DIR = CONFIG_DIR / 'logs'
LOG_FILE_NAME = 'xdebug_toolkit.log'

# --- Settings Storage ---
SETTINGS_FILE = CONFIG_DIR / 'settings.json'

# --- Directive Definitions ---
EXTENSION_DISPLAY_NAME = "Xdebug"
XDEBUG_DIRECTIVE = 'zend_extension="xdebug.so"'
INI_COMMENT_MARKER = ";"

# --- INI Variants ---
# "cli" is the ini loaded by the command-line interpreter, "default" the one used by web SAPIs.
VARIANT_CLI = "cli"
VARIANT_DEFAULT = "default"
DEFAULT_INI_FILENAME = "php.ini"
CLI_INI_FILENAME = "php-cli.ini"
CLI_INI_SUFFIX = "cli.ini"

# --- External Binaries ---
PHP_BINARY = "php"
VALET_BINARY = "valet"
VALET_RESTART_ARGS = ["restart"]

# Defaults merged under the contents of SETTINGS_FILE
DEFAULT_SETTINGS = {
    "php_binary": PHP_BINARY,
    "valet_binary": VALET_BINARY,
    "xdebug": {
        "restart_valet": False,
        "restart_timeout": None,  # seconds; None waits for valet indefinitely
    },
}


def ensure_dir(path: Path):
    """Creates a directory if it doesn't exist. Returns True on success."""
    try:
        path.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Ensured directory exists: {path}")
        return True
    except OSError as e:
        logger.error(f"CONFIG_ERROR: Error creating directory {path}: {e}", exc_info=True)
        return False
