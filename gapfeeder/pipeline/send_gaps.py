from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..compression.artifact import compressed_gap_file
from ..config import Settings
from ..gaps.locator import find_latest_gap_file
from ..notifications.mailer import MailInvocation, build_mail_invocation, send_mail
from ..summary.counter import read_recent_gap_messages

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PipelineResult:
    gap_file: Path
    compressed_size: int
    invocation: MailInvocation
    exit_code: int


def run_send_gaps(settings: Settings, temp_directory: Optional[Path] = None) -> PipelineResult:
    logger.info("Reading gap files")
    gap_file = find_latest_gap_file(settings.gap_directory, settings.gap_file_glob)

    logger.info("Compressing gap file attachment")
    with compressed_gap_file(gap_file, directory=temp_directory) as artifact:
        logger.info("Gathering the previous gap messages for mail body")
        summary = read_recent_gap_messages(settings.gap_count_path)

        logger.info("Creating mail arguments")
        invocation = build_mail_invocation(settings, artifact, summary)

        logger.info("Sending mail")
        exit_code = send_mail(invocation)

    return PipelineResult(
        gap_file=gap_file.path,
        compressed_size=artifact.size,
        invocation=invocation,
        exit_code=exit_code,
    )
