import logging
import os
import sys
from typing import List, Optional

import typer

from .cli import app
from .config import PROG, debug_enabled


def _setup_logging() -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug_enabled(os.environ) else logging.WARNING,
        stream=sys.stderr,
        format=f"{PROG}: %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    _setup_logging()

    try:
        code = app(args=argv, prog_name=PROG, standalone_mode=False)
    except typer.TyperException as e:
        # Bad options and unknown contexts exit 1, not the usage-error default of 2
        ctx = getattr(e, "ctx", None)
        if ctx is not None:
            typer.echo(ctx.get_usage(), err=True)
        typer.echo(f"{PROG}: {e.format_message()}", err=True)
        return 1
    except typer.Abort:
        typer.echo(f"{PROG}: aborted", err=True)
        return 1
    return code or 0
