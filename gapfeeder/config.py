from __future__ import annotations

import logging
import os
import socket
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

# only send email attachments smaller than this size
MAX_COMPRESSED_SIZE = 10 * 1024 * 1024

DEFAULT_RECIPIENTS = "support@unidata.ucar.edu"
DEFAULT_GAP_DIRECTORY = "/usr/local/ldm/logs"
DEFAULT_MAIL_COMMAND = "mailx"


def load_environment() -> None:
    """Load environment variables from a .env file if present."""
    env_file = os.getenv("ENV_FILE", ".env")
    env_path = Path(env_file)
    if env_path.is_file():
        load_dotenv(env_path)
    else:
        # Fallback: load .env in current working directory if ENV_FILE is missing
        default_path = Path(".env")
        if default_path.is_file():
            load_dotenv(default_path)


def short_hostname(name: str) -> str:
    if name.find(".") > 0:
        return name.split(".")[0]
    return name


def resolve_hostname() -> str:
    try:
        name = socket.gethostname()
    except OSError as exc:
        raise ConfigurationError(f"Could not determine local hostname: {exc}") from exc
    if not name:
        raise ConfigurationError("Could not determine local hostname: empty name")
    return short_hostname(name)


def parse_recipients(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _env_flag(name: str) -> Optional[bool]:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return value.lower() in {"1", "true", "yes"}


def _env_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc


@dataclass(frozen=True)
class Settings:
    recipients: tuple[str, ...]
    gap_directory: Path
    hostname: str
    gap_count_name: str
    gap_file_glob: str
    subject: str
    debug: bool = False
    max_transfer_size: int = MAX_COMPRESSED_SIZE
    mail_command: str = DEFAULT_MAIL_COMMAND

    @property
    def gap_count_path(self) -> Path:
        return self.gap_directory / self.gap_count_name

    @classmethod
    def resolve(
        cls,
        recipients: Optional[str] = None,
        gap_directory: Optional[str] = None,
        hostname: Optional[str] = None,
        gap_count_name: Optional[str] = None,
        gap_file_glob: Optional[str] = None,
        subject: Optional[str] = None,
        debug: Optional[bool] = None,
        max_transfer_size: Optional[int] = None,
        mail_command: Optional[str] = None,
    ) -> "Settings":
        """Build settings from explicit overrides, then environment, then defaults.

        Any value left as ``None`` falls through to the matching ``GAP_*``
        environment variable and finally to a computed default. Values derived
        from the host name are computed after the host name itself is settled.
        """
        load_environment()

        recipients = recipients or os.getenv("GAP_RECIPIENTS") or DEFAULT_RECIPIENTS
        gap_directory = gap_directory or os.getenv("GAP_DIRECTORY") or DEFAULT_GAP_DIRECTORY
        hostname = hostname or os.getenv("GAP_HOSTNAME") or resolve_hostname()
        gap_count_name = gap_count_name or os.getenv("GAP_COUNT_NAME") or f"{hostname}_gapcount"
        gap_file_glob = gap_file_glob or os.getenv("GAP_FILE_GLOB") or f"{hostname}_*.gap"
        subject = subject or os.getenv("GAP_SUBJECT") or f"Gap-in-sequence messages from {hostname}"
        mail_command = mail_command or os.getenv("GAP_MAIL_COMMAND") or DEFAULT_MAIL_COMMAND

        if debug is None:
            debug = bool(_env_flag("GAP_DEBUG"))

        if max_transfer_size is None:
            max_transfer_size = _env_int("GAP_MAX_XFER_ALLOWED")
        if max_transfer_size is None:
            max_transfer_size = MAX_COMPRESSED_SIZE
        if max_transfer_size < 0:
            raise ConfigurationError(
                f"Maximum transfer size must not be negative, got {max_transfer_size}"
            )
        if max_transfer_size > MAX_COMPRESSED_SIZE:
            logger.debug(
                "Clamping maximum transfer size %d to %d bytes",
                max_transfer_size,
                MAX_COMPRESSED_SIZE,
            )
            max_transfer_size = MAX_COMPRESSED_SIZE

        parsed_recipients = parse_recipients(recipients)
        if not parsed_recipients:
            raise ConfigurationError("At least one recipient is required.")

        return cls(
            recipients=parsed_recipients,
            gap_directory=Path(gap_directory).expanduser(),
            hostname=hostname,
            gap_count_name=gap_count_name,
            gap_file_glob=gap_file_glob,
            subject=subject,
            debug=debug,
            max_transfer_size=max_transfer_size,
            mail_command=mail_command,
        )

    def describe(self) -> list[tuple[str, object]]:
        return [
            ("Recipients", ",".join(self.recipients)),
            ("Gap File Directory", str(self.gap_directory)),
            ("Hostname", self.hostname),
            ("Gap Count File Name", self.gap_count_name),
            ("Gap File Glob", self.gap_file_glob),
            ("Subject line", self.subject),
            ("Maximum Transfer in Bytes", self.max_transfer_size),
            ("Mail command", self.mail_command),
        ]
