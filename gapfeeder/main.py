from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from .config import MAX_COMPRESSED_SIZE, Settings
from .errors import GapFeederError, NoGapFilesError
from .pipeline.send_gaps import run_send_gaps

EXIT_NO_GAP_FILES = 1
EXIT_FATAL = 2

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Mail the newest .gap file, compressed, with the latest gap counts."
    )
    parser.add_argument("--recipients", help="Where to send the email to (comma-separated).")
    parser.add_argument("--gap-directory", help="Directory to search for .gap files.")
    parser.add_argument(
        "--hostname",
        help="Hostname of this machine. Defaults to the computed short host name.",
    )
    parser.add_argument(
        "--gap-count-name",
        help="Name of the gap count file. Defaults to <hostname>_gapcount.",
    )
    parser.add_argument(
        "--gap-file-glob",
        help="Glob to search .gap files with. Defaults to <hostname>_*.gap.",
    )
    parser.add_argument(
        "--subject",
        help="Subject of the email. Defaults to one naming this machine.",
    )
    parser.add_argument(
        "--debug-mode",
        dest="debug",
        action="store_true",
        default=None,
        help="Log debug details of every stage.",
    )
    parser.add_argument(
        "--max-xfer-allowed",
        type=int,
        help=f"Maximum attachment size in bytes (capped at {MAX_COMPRESSED_SIZE}).",
    )
    parser.add_argument(
        "--mail-command",
        help="Mail transport executable, looked up on PATH. Defaults to mailx.",
    )
    return parser.parse_args(argv)


def configure_logging(debug: bool) -> None:
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level)


def log_settings(settings: Settings) -> None:
    logger.debug("Program start:")
    for label, value in settings.describe():
        logger.debug("  %s: %r", label, value)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(bool(args.debug))

    try:
        settings = Settings.resolve(
            recipients=args.recipients,
            gap_directory=args.gap_directory,
            hostname=args.hostname,
            gap_count_name=args.gap_count_name,
            gap_file_glob=args.gap_file_glob,
            subject=args.subject,
            debug=args.debug,
            max_transfer_size=args.max_xfer_allowed,
            mail_command=args.mail_command,
        )
        if settings.debug and not args.debug:
            configure_logging(True)
        log_settings(settings)

        result = run_send_gaps(settings)
    except NoGapFilesError as exc:
        logger.error("%s", exc)
        return EXIT_NO_GAP_FILES
    except GapFeederError as exc:
        logger.error("%s", exc)
        return EXIT_FATAL

    if result.exit_code < 0:
        # killed by a signal
        return 128 - result.exit_code
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
