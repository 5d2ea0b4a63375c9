"""
Credential Manager Module
Loads the generation API key from the environment and a .env file, and can
prompt for it and save it.

The key is looked up at call time, never cached at startup, so a missing key
surfaces as a per-request error instead of a crash.
"""

import os
from pathlib import Path
from typing import Optional

import structlog
from dotenv import load_dotenv, set_key
from rich.console import Console
from rich.prompt import Confirm, Prompt

console = Console()
logger = structlog.get_logger(__name__)

DEFAULT_API_KEY_ENV = "ANTHROPIC_API_KEY"


class CredentialManager:
    """Manages the API credential with .env storage and CLI prompting."""

    def __init__(
        self,
        env_file: Path = Path(".env"),
        api_key_env: str = DEFAULT_API_KEY_ENV,
    ):
        """
        Initialize credential manager.

        Args:
            env_file: Path to .env file for credential storage
            api_key_env: Environment variable holding the API key
        """
        self.env_file = Path(env_file)
        self.api_key_env = api_key_env
        self._load_credentials()

    def _load_credentials(self) -> None:
        """Load existing credentials from the .env file, without overriding the environment."""
        if self.env_file.exists():
            load_dotenv(self.env_file, override=False)
            logger.debug("credentials_loaded_from_env", env_file=str(self.env_file))
        else:
            logger.debug("no_env_file_found", env_file=str(self.env_file))

    def _set_secure_permissions(self) -> None:
        """Set secure file permissions on .env file (Unix only)."""
        if os.name == "nt":
            return
        try:
            os.chmod(self.env_file, 0o600)
        except OSError as e:
            logger.warning(
                "failed_to_set_permissions",
                env_file=str(self.env_file),
                error=str(e),
            )

    def get_api_key(self) -> Optional[str]:
        """
        Return the API key from the current environment, or None when unset.

        Re-reads the .env file so a key configured after startup is picked up.
        """
        self._load_credentials()
        value = os.getenv(self.api_key_env)
        if value and value.strip():
            return value.strip()
        logger.warning("api_key_missing", key=self.api_key_env)
        return None

    def prompt_for_api_key(self) -> str:
        """
        Prompt the user for the API key and save it to the .env file.

        Returns:
            The entered key

        Raises:
            ValueError: If no key was entered
        """
        existing = os.getenv(self.api_key_env)
        if existing and not Confirm.ask(
            f"{self.api_key_env} is already set ({self.mask_credential(existing)}). Replace it?",
            default=False,
        ):
            return existing

        console.print(f"\n[yellow][*] Credential Required: {self.api_key_env}[/yellow]")
        console.print("   API key used to generate talent pathways\n")
        value = Prompt.ask("   Enter value", password=True).strip()

        if not value:
            logger.error("required_credential_not_provided", key=self.api_key_env)
            raise ValueError(f"Required credential not provided: {self.api_key_env}")

        self._save_credential(self.api_key_env, value)
        return value

    def _save_credential(self, key: str, value: str) -> None:
        """
        Save credential to .env file and the current environment.

        Args:
            key: Environment variable name
            value: Credential value
        """
        if not self.env_file.exists():
            self.env_file.touch()
        try:
            set_key(str(self.env_file), key, value)
        except OSError as e:
            console.print(f"   [red][X] Failed to save credential: {e}[/red]\n")
            logger.error("failed_to_save_credential", key=key, error=str(e))
            raise
        os.environ[key] = value
        self._set_secure_permissions()
        console.print(f"   [green][+] Saved {key} to {self.env_file}[/green]\n")
        logger.info("credential_saved", key=key, env_file=str(self.env_file))

    @staticmethod
    def mask_credential(value: str, show_chars: int = 3) -> str:
        """
        Mask credential for display.

        Args:
            value: Credential value to mask
            show_chars: Number of characters to show at start

        Returns:
            Masked credential (e.g., "abc***")
        """
        if not value or len(value) <= show_chars:
            return "***"
        return f"{value[:show_chars]}{'*' * (len(value) - show_chars)}"
