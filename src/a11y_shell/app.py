from __future__ import annotations

import sys
from typing import List, Optional

from a11y_shell.core.handlers.audit_handler import handle_audit


def main(argv: Optional[List[str]] = None) -> int:
    """Console entry point for `a11y-audit`."""
    args = list(sys.argv[1:] if argv is None else argv)
    return handle_audit(args)


if __name__ == "__main__":
    sys.exit(main())
