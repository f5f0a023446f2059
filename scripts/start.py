#!/usr/bin/env python3
"""
Production startup script.

Validates PORT, makes sure the log directory exists, then replaces this
process with gunicorn (single worker, file-based access/error logs).
Restart policy and memory ceilings belong to the platform supervisor.

Usage:
    python scripts/start.py
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def gunicorn_argv(port: str, log_dir: Path) -> list[str]:
    return [
        "gunicorn",
        "app.wsgi:app",
        "--chdir", str(ROOT),
        "--bind", f"0.0.0.0:{port}",
        "--workers", "1",
        "--timeout", "60",
        "--preload",
        "--access-logfile", str(log_dir / "out.log"),
        "--error-logfile", str(log_dir / "err.log"),
    ]


def main() -> None:
    port = os.environ.get("PORT", "").strip()
    if not port:
        print("WARNING: PORT not set, using default 8080", flush=True)
        port = "8080"

    try:
        port_int = int(port)
        if port_int < 1 or port_int > 65535:
            raise ValueError("Port out of range")
    except ValueError:
        print(f"ERROR: Invalid PORT value '{port}'. Must be integer 1-65535.", flush=True)
        sys.exit(1)

    log_dir = Path(os.environ.get("LOG_DIR", "").strip() or ROOT / "logs")
    log_dir.mkdir(parents=True, exist_ok=True)

    print(f"=== Starting gunicorn on 0.0.0.0:{port} (logs in {log_dir}) ===", flush=True)

    # exec so gunicorn becomes the supervised process and receives signals directly
    os.execvp("gunicorn", gunicorn_argv(port, log_dir))


if __name__ == "__main__":
    main()
