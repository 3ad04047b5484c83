"""
YNAB MCP - Source Package

Exposes a YNAB budget to AI-assistant tool calls across several
credential profiles and budget aliases.

DESIGN PRINCIPLES:
1. Humans speak in names, the API speaks in identifiers
2. Resolve once, cache briefly, refresh wholesale
3. Fail loudly with the alternatives the caller could have used
4. One API client per profile, never two
"""

__version__ = "1.0.0"
__author__ = "YNAB MCP Team"
