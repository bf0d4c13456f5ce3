"""
Configuration

Environment-driven settings shared by every command. Values are read from
the process environment after an optional .env file has been loaded.

Variables:
    SPO_URL               Tenant root URL, e.g. https://contoso.sharepoint.com
    SPO_ACCESS_TOKEN      Bearer token sent with every request
    SPO_APPLICATION_NAME  ApplicationName reported in CSOM requests
    SPO_DISABLE_TELEMETRY Set to 1/true to turn telemetry off
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from spo import __version__

# =============================================================================
# CONFIGURATION
# =============================================================================

PACKAGE_DIR = Path(__file__).parent
PROJECT_ROOT = PACKAGE_DIR.parent

CSOM_SCHEMA_VERSION = "15.0.0.0"
CSOM_LIBRARY_VERSION = "16.0.0.0"
CSOM_NAMESPACE = "http://schemas.microsoft.com/sharepoint/clientquery/2009"

# TypeId of Microsoft.SharePoint.Taxonomy.TaxonomySession
TAXONOMY_SESSION_TYPE_ID = "{981cbc68-9edc-4f8d-872f-71146fcbb84f}"

DEFAULT_APPLICATION_NAME = f"spo-taxonomy-cli v{__version__}"

TRUTHY = ("1", "true", "yes", "on")


# =============================================================================
# ENVIRONMENT LOADING
# =============================================================================


def load_env():
    """Load environment variables from the first .env file found."""
    env_paths = [
        Path.cwd() / ".env",
        PROJECT_ROOT / ".env",
        Path.home() / ".spo-taxonomy-cli" / ".env",
    ]
    for env_path in env_paths:
        if env_path.exists():
            load_dotenv(env_path)
            return env_path
    return None


def get_spo_url() -> str:
    return os.getenv("SPO_URL", "").strip().rstrip("/")


def get_access_token() -> str:
    return os.getenv("SPO_ACCESS_TOKEN", "").strip()


def get_application_name() -> str:
    return os.getenv("SPO_APPLICATION_NAME", "").strip() or DEFAULT_APPLICATION_NAME


def telemetry_disabled() -> bool:
    return os.getenv("SPO_DISABLE_TELEMETRY", "").strip().lower() in TRUTHY
