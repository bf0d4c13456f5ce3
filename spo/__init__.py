# =============================================================================
# SPO-TAXONOMY-CLI
# =============================================================================
"""
Command-line tools for SharePoint Online.

Commands talk to the legacy CSOM ProcessQuery endpoint (taxonomy term
groups and term sets) and to the REST API (site groups).
"""

__version__ = "0.1.0"
