from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass

from ..config import Settings
from ..errors import TransportLaunchError
from ..gaps.models import CompressedArtifact
from ..summary.counter import SummaryBuffer

logger = logging.getLogger(__name__)

SUBJECT_FLAG = "-s"
ATTACHMENT_FLAG = "-a"
NO_ATTACHMENT_SUFFIX = " without gap file attachment"


@dataclass(slots=True)
class MailInvocation:
    command: str
    args: list[str]
    body: bytes
    attached: bool

    @property
    def argv(self) -> list[str]:
        return [self.command, *self.args]


def build_mail_invocation(
    settings: Settings, artifact: CompressedArtifact, summary: SummaryBuffer
) -> MailInvocation:
    logger.debug("Compressed size: %d bytes", artifact.size)

    subject = settings.subject
    args = [SUBJECT_FLAG]
    attached = artifact.size <= settings.max_transfer_size
    if attached:
        args.extend([subject, ATTACHMENT_FLAG, str(artifact.path)])
    else:
        logger.warning(
            "Compressed gap file is %d bytes, over the %d byte transfer limit; "
            "it will not be attached",
            artifact.size,
            settings.max_transfer_size,
        )
        args.append(subject + NO_ATTACHMENT_SUFFIX)

    args.append(",".join(settings.recipients))
    return MailInvocation(
        command=settings.mail_command,
        args=args,
        body=summary.body(),
        attached=attached,
    )


def send_mail(invocation: MailInvocation) -> int:
    """Run the mail transport and wait for it, returning its exit code.

    Standard output and error are inherited from this process.
    """
    logger.debug("Presend mail arguments: %s", " ".join(invocation.argv))
    try:
        completed = subprocess.run(
            invocation.argv,
            input=invocation.body,
            check=False,
        )
    except (OSError, ValueError) as exc:
        raise TransportLaunchError(
            f"Could not launch mail command {invocation.command!r}: {exc}"
        ) from exc

    if completed.returncode != 0:
        logger.error(
            "Mail command %r exited with status %d",
            invocation.command,
            completed.returncode,
        )
    return completed.returncode
