"""
Configuration check command.

Usage:
    ynab-mcp-check              # Summary of loaded profiles
    ynab-mcp-check --profiles   # Per-profile budgets and defaults

Exits non-zero when no profile can be loaded, so it can gate a server
start in a wrapper script.
"""

import argparse
import json
import sys
from typing import Optional

from ynab_mcp.audit import configure_logging
from ynab_mcp.budgets import get_all_profiles, get_profile_info
from ynab_mcp.config import get_config, get_settings, validate_configuration


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Check YNAB MCP profile configuration")
    parser.add_argument(
        "--profiles",
        action="store_true",
        help="Show budgets and default accounts for every profile",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level, settings.json_logs)

    summary = validate_configuration()
    if not summary["valid"]:
        print(f"Configuration error: {summary['error']}", file=sys.stderr)
        print("See DESIGN.md for the YNAB_* environment variables", file=sys.stderr)
        return 1

    if args.profiles:
        summary["details"] = [
            {**overview, **get_profile_info(overview["name"], get_config())}
            for overview in get_all_profiles()
        ]

    print(json.dumps(summary, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
