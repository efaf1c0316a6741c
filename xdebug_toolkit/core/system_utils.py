import subprocess
import shlex
import logging
from pathlib import Path
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

from . import config

# Snippet evaluated by the interpreter to report which ini file it loaded
LOADED_INI_SNIPPET = "echo php_ini_loaded_file();"


def run_command(command_list: List[str], timeout: Optional[float] = None) -> Tuple[int, str, str]:
    """
    Runs a system command and captures output/return code.

    Returns (returncode, stdout, stderr). Negative codes are produced here:
    -1 command not found, -2 other OS error, -3 timed out.
    """
    joined_command = shlex.join(command_list)
    logger.debug(f"SYSTEM_UTILS: Running command: {joined_command} (timeout: {timeout})")
    try:
        result = subprocess.run(
            command_list,
            capture_output=True,
            text=True,
            check=False,
            encoding='utf-8',
            errors='replace',
            timeout=timeout
        )
        if result.returncode != 0:
            log_message = (
                f"SYSTEM_UTILS: Command failed (Code: {result.returncode}): {joined_command}\n"
                f"  Stdout: {result.stdout.strip()}\n"
                f"  Stderr: {result.stderr.strip()}"
            )
            logger.warning(log_message)
        return result.returncode, result.stdout.strip(), result.stderr.strip()
    except FileNotFoundError:
        msg = f"SYSTEM_UTILS: Command not found: {command_list[0]}"
        logger.error(msg)
        return -1, "", msg
    except subprocess.TimeoutExpired:
        msg = f"SYSTEM_UTILS: Command timed out after {timeout}s: {joined_command}"
        logger.error(msg)
        return -3, "", msg
    except OSError as e:
        msg = f"SYSTEM_UTILS: Error running command '{joined_command}': {e}"
        logger.error(msg, exc_info=True)
        return -2, "", msg


def get_loaded_ini_path(php_binary: Optional[str] = None) -> Optional[Path]:
    """
    Asks the PHP interpreter which php.ini it loaded.
    Returns None if PHP cannot be run or reports no loaded ini file.
    """
    php_binary = php_binary or config.PHP_BINARY
    ret_code, stdout, stderr = run_command([php_binary, "-r", LOADED_INI_SNIPPET])
    if ret_code != 0:
        logger.warning(f"SYSTEM_UTILS: Could not query loaded ini from '{php_binary}' (code {ret_code}): {stderr}")
        return None
    # php_ini_loaded_file() returns false (echoed as "") when no ini was loaded
    if not stdout:
        logger.info(f"SYSTEM_UTILS: '{php_binary}' reports no loaded php.ini.")
        return None
    ini_path = Path(stdout.splitlines()[-1].strip())
    logger.debug(f"SYSTEM_UTILS: '{php_binary}' loaded ini file: {ini_path}")
    return ini_path
