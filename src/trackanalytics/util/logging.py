# trackanalytics/util/logging.py
from __future__ import annotations

import datetime
import sys
from typing import Optional, TextIO


def log(msg: str, *, file: Optional[TextIO] = None) -> None:
    """Print a timestamped log line (local time with timezone), stdout by default."""
    ts = datetime.datetime.now().astimezone().isoformat(timespec="seconds")
    print(f"{ts}  {msg}", file=file or sys.stdout)
