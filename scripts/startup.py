#!/usr/bin/env python3
"""
Startup script for container deployment.
Creates missing tables, then starts uvicorn.
"""

import asyncio
import os
import sys
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from portal.database import engine, init_db


async def prepare_database() -> bool:
    """Create any missing tables and return success status."""
    print("\n=== Preparing database ===")
    try:
        await init_db()
        return True
    except Exception as e:
        print(f"Warning: database preparation failed: {e}")
        return False
    finally:
        await engine.dispose()


def main():
    print("\n" + "=" * 50)
    print("SchoolPortal Startup Script")
    print("=" * 50)

    asyncio.run(prepare_database())

    # Start uvicorn
    port = os.environ.get("PORT", "8000")
    print(f"\n=== Starting uvicorn on port {port} ===\n")

    os.execvp("uvicorn", [
        "uvicorn",
        "portal.main:app",
        "--host", "0.0.0.0",
        "--port", port
    ])


if __name__ == "__main__":
    main()
