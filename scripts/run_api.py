#!/usr/bin/env python
"""
Launch the Catalog Pricing API under uvicorn.

Usage:
    python scripts/run_api.py [--no-reload]

Host and port come from CATALOG_PRICING_HOST / CATALOG_PRICING_PORT.
"""
import os
import subprocess
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
src_path = project_root / 'src'
sys.path.insert(0, str(src_path))

from catalog_pricing.config.settings import get_settings


def main():
    os.chdir(project_root)
    settings = get_settings()

    # uvicorn runs in a child process, so src goes on its PYTHONPATH too
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(p for p in (str(src_path), env.get("PYTHONPATH")) if p)

    command = [
        sys.executable, "-m", "uvicorn",
        "catalog_pricing.api.main:app",
        "--host", os.getenv("CATALOG_PRICING_HOST", "127.0.0.1"),
        "--port", os.getenv("CATALOG_PRICING_PORT", "8000"),
        "--log-level", settings.log_level.lower(),
    ]
    if "--no-reload" not in sys.argv[1:]:
        command.append("--reload")

    print("Starting Catalog Pricing API (FastAPI)...")
    try:
        subprocess.run(command, env=env)
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
