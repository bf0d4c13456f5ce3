"""
Option Validation

Validators return True when the value is acceptable, otherwise an error
message (or False when there is nothing useful to say). Commands collect
these and the CLI turns the first failure into a ValidationError before any
request is sent.
"""

import re
from typing import Union
from urllib.parse import urlparse

GUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


def is_valid_guid(value) -> bool:
    if not isinstance(value, str):
        return False
    return bool(GUID_PATTERN.match(value))


def is_valid_sharepoint_url(url) -> Union[bool, str]:
    if not url:
        return False

    parsed = urlparse(url)
    if parsed.scheme != "https" or not parsed.netloc:
        return f"{url} is not a valid SharePoint Online site URL"
    return True


def check_option_sets(options: dict, option_sets) -> Union[bool, str]:
    """Each option set requires exactly one of its options to be present."""
    for option_set in option_sets:
        present = [name for name in option_set if options.get(name) not in (None, "")]
        names = ", ".join(option_set)
        if not present:
            return f"Specify one of the following options: {names}"
        if len(present) > 1:
            return f"Specify one of the following options: {names}, but not multiple"
    return True
