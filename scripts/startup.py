#!/usr/bin/env python3
"""
Startup script for container deployment.
Runs migrations and creates the platform admin if configured.
"""

import os
import subprocess


def run_command(cmd: list[str], description: str) -> bool:
    """Run a command and return success status."""
    print(f"\n=== {description} ===")
    try:
        subprocess.run(cmd, check=True)
        return True
    except subprocess.CalledProcessError as e:
        print(f"Warning: {description} failed with code {e.returncode}")
        return False


def main():
    print("\n" + "=" * 50)
    print("PKASLA Startup Script")
    print("=" * 50)

    run_command(["alembic", "upgrade", "head"], "Running database migrations")

    email = os.environ.get("ADMIN_EMAIL", "").strip()
    if email:
        name = os.environ.get("ADMIN_NAME", "Admin").strip()
        # Existing admins are reused, so a non-zero exit only means a conflicting user
        run_command(
            ["python", "scripts/create_admin.py", "--email", email, "--name", name],
            "Creating admin",
        )
    else:
        print("\nSkipping admin creation (ADMIN_EMAIL not set)")

    port = os.environ.get("PORT", "4000")
    print(f"\n=== Starting uvicorn on port {port} ===\n")

    os.execvp("uvicorn", [
        "uvicorn",
        "pkasla.main:app",
        "--host", "0.0.0.0",
        "--port", port
    ])


if __name__ == "__main__":
    main()
