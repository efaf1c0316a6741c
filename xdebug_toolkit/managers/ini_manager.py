# xdebug_toolkit/managers/ini_manager.py

import os
import shutil
import tempfile
import logging
from pathlib import Path
from typing import Callable, Optional, Tuple

logger = logging.getLogger(__name__)

# --- Import Core Modules ---
from ..core import config
# --- End Imports ---


class IniNotFoundError(FileNotFoundError):
    """The ini file for the requested variant does not exist and was not generated."""

    def __init__(self, path: Path, variant: str):
        super().__init__(f"Ini file not found in {path}")
        self.path = path
        self.variant = variant


class IniFile:
    """An ini file resolved for one variant, with its full text loaded."""

    def __init__(self, path: Path, content: str, variant: str):
        self.path = path
        self.content = content
        self.variant = variant

    @property
    def is_cli(self) -> bool:
        return self.variant == config.VARIANT_CLI

    def __repr__(self):
        return f"IniFile(path={str(self.path)!r}, variant={self.variant!r})"


# --- Path Helpers ---
def is_cli_ini_path(ini_path: Path) -> bool:
    """True if the filename marks it as the command-line interpreter's ini (e.g. php-cli.ini)."""
    return Path(ini_path).name.endswith(config.CLI_INI_SUFFIX)


def sibling_ini_path(active_ini_path: Path, variant: str) -> Path:
    """
    Returns the path the requested variant lives at next to the active ini file.
    Only the filename is rewritten (php.ini <-> php-cli.ini); directories are left alone.
    """
    active_ini_path = Path(active_ini_path)
    name = active_ini_path.name
    if variant == config.VARIANT_CLI:
        if is_cli_ini_path(active_ini_path):
            return active_ini_path
        new_name = name.replace(config.DEFAULT_INI_FILENAME, config.CLI_INI_FILENAME)
    elif variant == config.VARIANT_DEFAULT:
        if not is_cli_ini_path(active_ini_path):
            return active_ini_path
        new_name = name.replace(config.CLI_INI_FILENAME, config.DEFAULT_INI_FILENAME)
    else:
        raise ValueError(f"Unknown ini variant: {variant!r}")

    if new_name == name:
        logger.warning(f"INI_MANAGER: Cannot derive a {variant} ini name from '{name}'. Using the active file.")
    return active_ini_path.with_name(new_name)


# --- Raw File Access ---
def read_ini_text(ini_path: Path) -> str:
    """Reads the whole file without newline translation so rewrites keep the exact bytes."""
    with open(ini_path, 'r', encoding='utf-8', errors='surrogateescape', newline='') as f:
        return f.read()


def write_ini_text(ini_path: Path, text: str) -> None:
    """
    Replaces the file atomically: temp file beside it, fsync, os.replace.
    Symlinks are followed so the link stays in place and its target gets the new content.
    The directory holding the target must be writable.
    """
    ini_path = Path(os.path.realpath(ini_path))
    temp_path_obj = None
    try:
        with tempfile.NamedTemporaryFile('w', dir=ini_path.parent, delete=False, encoding='utf-8',
                                         errors='surrogateescape', newline='',
                                         prefix=f"{ini_path.name}.tmp.") as temp_f:
            temp_path_obj = Path(temp_f.name)
            temp_f.write(text)
            temp_f.flush()
            os.fsync(temp_f.fileno())

        if ini_path.exists(): # Preserve permissions of the original
            shutil.copystat(ini_path, temp_path_obj)

        os.replace(temp_path_obj, ini_path)
        logger.debug(f"INI_MANAGER: Wrote {len(text)} characters to {ini_path}")
    except OSError as e:
        logger.error(f"INI_MANAGER: Error writing ini file {ini_path}: {e}", exc_info=True)
        if temp_path_obj and temp_path_obj.exists():
            temp_path_obj.unlink(missing_ok=True)
        raise


# --- IniLocator ---
def resolve_ini_file(active_ini_path: Path, variant: str, force: bool = False,
                     on_generated: Optional[Callable[[str, Path], None]] = None) -> IniFile:
    """
    Resolves and loads the ini file for `variant`, based on the ini the interpreter loaded.

    If the variant's file is missing and `force` is set, it is created as a byte copy
    of the active ini and `on_generated(variant, path)` is called.

    Raises:
        IniNotFoundError: the file does not exist (and was not generated).
        OSError: reading or copying failed.
    """
    active_ini_path = Path(active_ini_path)
    current_is_cli = is_cli_ini_path(active_ini_path)
    logger.debug(f"INI_MANAGER: Active ini {active_ini_path} (cli: {current_is_cli}), requested variant '{variant}'.")

    ini_path = sibling_ini_path(active_ini_path, variant)
    if ini_path != active_ini_path and not ini_path.is_file() and force:
        if not active_ini_path.is_file():
            logger.error(f"INI_MANAGER: Cannot generate {ini_path}: active ini {active_ini_path} is missing.")
            raise IniNotFoundError(active_ini_path, variant)
        logger.info(f"INI_MANAGER: Generating {variant} ini {ini_path} from {active_ini_path}")
        shutil.copy2(active_ini_path, ini_path)
        if on_generated:
            on_generated(variant, ini_path)

    if not ini_path.is_file():
        logger.warning(f"INI_MANAGER: Ini file not found: {ini_path}")
        raise IniNotFoundError(ini_path, variant)

    content = read_ini_text(ini_path)
    logger.info(f"INI_MANAGER: Loaded {variant} ini file {ini_path}")
    return IniFile(ini_path, content, variant)


def reload_ini_file(ini_file: IniFile) -> IniFile:
    """Returns a fresh IniFile with the content currently on disk."""
    return IniFile(ini_file.path, read_ini_text(ini_file.path), ini_file.variant)


# --- DirectiveToggler ---
def commented(directive: str) -> str:
    return f"{config.INI_COMMENT_MARKER}{directive}"


def is_directive_enabled(content: str, directive: str = config.XDEBUG_DIRECTIVE) -> bool:
    """True if any line starts with the active (uncommented) directive."""
    return any(line.startswith(directive) for line in content.split("\n"))


def rewrite_directive(content: str, search: str, replace: str) -> Tuple[str, int]:
    """
    Replaces the `search` prefix with `replace` on every line that starts with it.
    The remainder of each line and all line endings are kept as they were.
    Returns the new content and the number of lines changed.
    """
    new_lines = []
    changed = 0
    # only "\n" starts a new line; "\r" and other separators stay inside the line
    for line in content.split("\n"):
        if line.startswith(search):
            line = replace + line[len(search):]
            changed += 1
        new_lines.append(line)
    return "\n".join(new_lines), changed


def _modify_directive(ini_file: IniFile, search: str, replace: str) -> Tuple[IniFile, int]:
    new_content, changed = rewrite_directive(ini_file.content, search, replace)
    if changed:
        logger.info(f"INI_MANAGER: Rewriting {changed} line(s) in {ini_file.path}: '{search}' -> '{replace}'")
        write_ini_text(ini_file.path, new_content)
    else:
        logger.warning(f"INI_MANAGER: No line starting with '{search}' in {ini_file.path}. Nothing changed.")
    # Status is always taken from what is on disk now
    return reload_ini_file(ini_file), changed


def enable_directive(ini_file: IniFile, directive: str = config.XDEBUG_DIRECTIVE) -> Tuple[IniFile, int]:
    return _modify_directive(ini_file, commented(directive), directive)


def disable_directive(ini_file: IniFile, directive: str = config.XDEBUG_DIRECTIVE) -> Tuple[IniFile, int]:
    return _modify_directive(ini_file, directive, commented(directive))


def toggle_directive(ini_file: IniFile, directive: str = config.XDEBUG_DIRECTIVE) -> Tuple[IniFile, int]:
    if is_directive_enabled(ini_file.content, directive):
        return disable_directive(ini_file, directive)
    return enable_directive(ini_file, directive)
