from __future__ import annotations

import sys
from typing import Optional, Sequence


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Stand-in for mailx that prints each argument it receives, one per line."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("No command line arguments are passed to simulated mailx")
        return 0
    for arg in args:
        print(repr(arg))
    return 0


if __name__ == "__main__":
    sys.exit(main())
