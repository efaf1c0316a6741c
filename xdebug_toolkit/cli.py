import os
import sys
import argparse
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

from xdebug_toolkit.core import config
from xdebug_toolkit.core.logging_setup import configure_logging
from xdebug_toolkit.core.system_utils import get_loaded_ini_path
from xdebug_toolkit.managers.settings_manager import load_settings
from xdebug_toolkit.managers.valet_manager import restart_valet_if_appropriate
from xdebug_toolkit.managers.ini_manager import (
    IniNotFoundError,
    resolve_ini_file,
    is_directive_enabled,
    enable_directive,
    disable_directive,
    toggle_directive,
)
from xdebug_toolkit.ui.reporter import Reporter

ACTIONS = ('enable', 'disable', 'toggle', 'status')

MUTATING_ACTIONS: Dict[str, Callable] = {
    'enable': enable_directive,
    'disable': disable_directive,
    'toggle': toggle_directive,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xdebug-toolkit",
        description=f"Handy tools to manage {config.EXTENSION_DISPLAY_NAME}."
    )
    parser.add_argument('--cli', action='store_true', help=f'Modify {config.CLI_INI_FILENAME}')
    parser.add_argument('--force', action='store_true', help='Generate ini file if not exists')
    parser.add_argument('--enable', action='store_true', help=f'Enable {config.EXTENSION_DISPLAY_NAME}')
    parser.add_argument('--disable', action='store_true', help=f'Disable {config.EXTENSION_DISPLAY_NAME}')
    parser.add_argument('--toggle', action='store_true', help=f'Toggle {config.EXTENSION_DISPLAY_NAME}')
    parser.add_argument('--status', action='store_true', help=f'Show {config.EXTENSION_DISPLAY_NAME} status')
    parser.add_argument('--ini', metavar='PATH', type=Path,
                        help='Ini file the PHP interpreter loads (detected via `php` when omitted)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debug output to stderr')
    return parser


def select_action(args: argparse.Namespace) -> Optional[str]:
    """Returns the single requested action, 'status' if none, or None if several were given."""
    actions = [action for action in ACTIONS if getattr(args, action)]
    if not actions:
        return 'status'
    if len(actions) > 1:
        return None
    return actions[0]


def _describe_no_change(action: str, ini_file) -> str:
    # a toggle can only come up empty when it tried to enable
    name = config.EXTENSION_DISPLAY_NAME
    if action in ('enable', 'toggle'):
        wanted = f"{config.INI_COMMENT_MARKER}{config.XDEBUG_DIRECTIVE}"
    else:
        wanted = config.XDEBUG_DIRECTIVE
    return f"No '{wanted}' line found in {ini_file.path.name}; {name} was not changed."


def run(argv: Optional[List[str]] = None, reporter: Optional[Reporter] = None,
        settings: Optional[Dict[str, Any]] = None, restart_runner: Optional[Callable] = None) -> int:
    """Parses arguments, performs the action and returns the exit code."""
    args = build_parser().parse_args(argv)
    reporter = reporter or Reporter()

    action = select_action(args)
    if action is None:
        logger.warning(f"CLI: Conflicting actions requested: {[a for a in ACTIONS if getattr(args, a)]}")
        reporter.error('Only one command is allowed')
        return 1

    if settings is None:
        settings = load_settings()

    active_ini_path = args.ini
    if active_ini_path is None:
        active_ini_path = get_loaded_ini_path(settings.get("php_binary"))
        if active_ini_path is None:
            reporter.error(f"Could not determine the ini file loaded by '{settings.get('php_binary')}'")
            reporter.hint('Pass --ini PATH to point at it')
            return 1

    variant = config.VARIANT_CLI if args.cli else config.VARIANT_DEFAULT
    try:
        ini_file = resolve_ini_file(active_ini_path, variant, force=args.force, on_generated=reporter.generated)
    except IniNotFoundError as e:
        reporter.error(str(e))
        reporter.hint('Use --force to generate')
        return 1
    except OSError as e:
        logger.error(f"CLI: Failed to load ini for variant '{variant}': {e}", exc_info=True)
        reporter.error(f"Could not read ini file: {e}")
        return 1

    if action == 'status':
        reporter.status(is_directive_enabled(ini_file.content), ini_file.path)
        return 0

    try:
        ini_file, changed = MUTATING_ACTIONS[action](ini_file)
    except PermissionError as e:
        logger.error(f"CLI: No permission to update {ini_file.path}: {e}")
        reporter.error(f"Could not update {ini_file.path}: {e}")
        target_dir = Path(os.path.realpath(ini_file.path)).parent
        reporter.hint(f"The file is replaced via a temporary file, so {target_dir} must be writable too")
        return 1
    except OSError as e:
        logger.error(f"CLI: Failed to {action} {config.EXTENSION_DISPLAY_NAME} in {ini_file.path}: {e}", exc_info=True)
        reporter.error(f"Could not update {ini_file.path}: {e}")
        return 1

    if not changed:
        reporter.warning(_describe_no_change(action, ini_file))
    reporter.status(is_directive_enabled(ini_file.content), ini_file.path)

    if changed:
        restart_valet_if_appropriate(ini_file, settings, reporter, runner=restart_runner)
    return 0


def main():
    preview_args, _ = build_parser().parse_known_args()
    configure_logging(verbose=preview_args.verbose)
    sys.exit(run())


if __name__ == "__main__":
    main()
