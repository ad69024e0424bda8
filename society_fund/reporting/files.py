"""
Output file helpers shared by the exporters.
"""

import logging
import os
import tempfile
from contextlib import contextmanager
from decimal import Decimal
from pathlib import Path
from typing import Generator

logger = logging.getLogger(__name__)


@contextmanager
def atomic_output(path: Path) -> Generator[Path, None, None]:
    """Yield a temporary path next to ``path`` and move it into place on success.

    On any exception the temporary file is removed and ``path`` is left
    untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}-", suffix=path.suffix, dir=path.parent)
    os.close(fd)
    tmp_path = Path(tmp_name)
    try:
        yield tmp_path
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def is_whole(amount: Decimal) -> bool:
    return amount == amount.to_integral_value()


def format_money(amount: Decimal, prefix: str = "") -> str:
    """Format an amount for printed documents: "Rs 1,500" or "-Rs 20.50"."""
    digits = f"{abs(amount):,.0f}" if is_whole(amount) else f"{abs(amount):,.2f}"
    sign = "-" if amount < 0 else ""
    return f"{sign}{prefix}{digits}"
