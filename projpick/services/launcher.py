"""
Editor Launcher - Open a project in an external editor.

The editor runs with the user's interactive shell environment, so tools
added to PATH in ~/.zshrc and friends are visible to it even when the
picker itself was started by the compositor with a bare environment.
"""

import os
import subprocess
from typing import Optional

from loguru import logger

DEFAULT_EDITOR = "e"

# Brackets the `env` output so shell rc noise (motd, prompts) is ignored
_ENV_DELIMITER = "_PROJPICK_ENV_DELIMITER_"


class LaunchError(Exception):
    """The editor process could not be started."""


class ShellEnvironmentError(LaunchError):
    """The user's shell environment could not be resolved."""


def parse_env_output(output: str) -> dict[str, str]:
    """
    Parse `env` output captured between delimiters.

    Lines without '=' are continuations of a multi-line value.
    """
    parts = output.split(_ENV_DELIMITER)
    if len(parts) >= 3:
        output = parts[1]

    env = {}
    last_key = None
    for line in output.splitlines():
        key, sep, value = line.partition("=")
        if sep and key and " " not in key:
            env[key] = value
            last_key = key
        elif last_key is not None:
            env[last_key] += "\n" + line
    return env


class EditorLauncher:
    """Spawn the configured editor command with a shell-resolved environment."""

    def __init__(self, command: str = DEFAULT_EDITOR, shell: Optional[str] = None,
                 env_timeout: float = 5.0):
        self.command = command
        self.shell = shell or os.environ.get("SHELL") or "/bin/sh"
        self.env_timeout = env_timeout

    def resolve_environment(self) -> dict[str, str]:
        """
        Ask the user's interactive login shell for its environment.

        Raises:
            ShellEnvironmentError: shell missing, timed out, or failed
        """
        script = f"printf '%s' {_ENV_DELIMITER}; env; printf '%s' {_ENV_DELIMITER}; exit"
        try:
            result = subprocess.run(
                [self.shell, "-ilc", script],
                capture_output=True,
                text=True,
                timeout=self.env_timeout,
                env={**os.environ, "DISABLE_AUTO_UPDATE": "true"},
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise ShellEnvironmentError(f"Could not run {self.shell}: {e}") from e

        if result.returncode != 0:
            raise ShellEnvironmentError(
                f"{self.shell} exited with status {result.returncode}"
            )

        env = parse_env_output(result.stdout)
        logger.debug(f"Resolved {len(env)} variables from {self.shell}")
        return env

    def launch(self, path: str, env: Optional[dict] = None) -> subprocess.Popen:
        """
        Start the editor on `path`. Does not wait for it to exit.

        Args:
            path: Absolute project path, passed as the only argument
            env: Variables overlaid on the current process environment

        Raises:
            LaunchError: editor command not found or not executable
        """
        try:
            process = subprocess.Popen(
                [self.command, path],
                env={**os.environ, **(env or {})},
                start_new_session=True,
            )
        except OSError as e:
            raise LaunchError(f"Could not start '{self.command}': {e.strerror or e}") from e

        logger.info(f"Opened {path} with {self.command} (pid {process.pid})")
        return process


def show_in_file_browser(path: str) -> bool:
    """Reveal `path` in the default file manager via xdg-open."""
    try:
        subprocess.Popen(
            ["xdg-open", path],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except FileNotFoundError:
        logger.error("xdg-open not found, cannot open file browser")
        return False
    return True


def copy_to_clipboard(text: str) -> bool:
    """Copy `text` to the Wayland clipboard via wl-copy."""
    try:
        subprocess.run(["wl-copy"], input=text, text=True, check=True, timeout=2)
    except FileNotFoundError:
        logger.error("wl-copy not found, cannot copy to clipboard")
        return False
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired):
        logger.exception("wl-copy failed")
        return False
    return True
