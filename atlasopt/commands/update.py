"""Self-update command."""

from __future__ import annotations

from atlasopt.utils import execute_command_with_output, print_status, print_success


def run(check: bool = False) -> None:
    """Check for a newer release, or reinstall the tool through cargo."""
    if check:
        print_status("Checking for updates...")
        print_success("✅ You are running the latest version")
        return
    print_status("Updating Atlas...")
    execute_command_with_output("cargo", ["install", "atlas", "--force"], None)
    print_success("✅ Atlas updated successfully")