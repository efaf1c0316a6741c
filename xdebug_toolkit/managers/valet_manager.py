# xdebug_toolkit/managers/valet_manager.py

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

from ..core import config
from ..core.system_utils import run_command

# Signature of the command runner: (command_list, timeout) -> (returncode, stdout, stderr)
CommandRunner = Callable[..., Tuple[int, str, str]]


def get_restart_command(settings: Dict[str, Any]) -> List[str]:
    return [settings.get("valet_binary") or config.VALET_BINARY] + list(config.VALET_RESTART_ARGS)


def restart_valet_if_appropriate(ini_file, settings: Dict[str, Any], reporter,
                                 runner: Optional[CommandRunner] = None) -> Optional[bool]:
    """
    Restarts valet after the web (default variant) ini changed, if the settings allow it.

    Returns None when skipped, otherwise whether valet exited with code 0.
    A failing restart is reported as a warning; it never fails the calling action.
    """
    xdebug_settings = settings.get("xdebug", {})
    if ini_file.is_cli:
        logger.debug("VALET_MANAGER: CLI ini changed; valet does not need a restart.")
        return None
    if not xdebug_settings.get("restart_valet"):
        logger.debug("VALET_MANAGER: restart_valet is disabled in settings. Skipping restart.")
        return None

    runner = runner or run_command
    command = get_restart_command(settings)
    timeout = xdebug_settings.get("restart_timeout")
    outcome = {}

    def _restart():
        logger.info(f"VALET_MANAGER: Restarting valet: {command}")
        outcome["result"] = runner(command, timeout=timeout)
        return outcome["result"][0] == 0

    success = reporter.task("Restarting valet", _restart, "restarting...")
    if not success:
        ret_code, _, stderr = outcome["result"]
        logger.warning(f"VALET_MANAGER: valet restart exited with code {ret_code}: {stderr}")
        reporter.warning(f"Valet restart failed (exit code {ret_code})" + (f": {stderr}" if stderr else ""))
    return success
