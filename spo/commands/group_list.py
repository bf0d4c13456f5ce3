"""
spo-cli group-list

Lists the site groups of a web through the REST API.

With --associatedGroupsOnly only the web's owner, member and visitor groups
are returned. JSON output keeps the server's shape
({"AssociatedMemberGroup": {...}, ...}); text output flattens it to one row
per group with the association in `Type`.

Usage:
    spo-cli group-list --webUrl https://contoso.sharepoint.com
    spo-cli group-list --webUrl https://contoso.sharepoint.com --associatedGroupsOnly --output text
"""

import logging

from spo.validation import is_valid_sharepoint_url

logger = logging.getLogger(__name__)

NAME = "group-list"
DESCRIPTION = "Lists all the groups within specific web"
DEFAULT_PROPERTIES = ["Id", "Title", "LoginName", "IsHiddenInUI", "PrincipalType", "Type"]
OPTION_SETS = []

ASSOCIATED_GROUPS = ("AssociatedMemberGroup", "AssociatedOwnerGroup", "AssociatedVisitorGroup")


def add_arguments(parser):
    parser.add_argument("-u", "--webUrl", required=True, help="URL of the site")
    parser.add_argument(
        "--associatedGroupsOnly",
        action="store_true",
        default=None,
        help="Only return the associated owner, member and visitor groups",
    )


def telemetry_properties(options: dict) -> dict:
    return {"associatedGroupsOnly": bool(options.get("associatedGroupsOnly"))}


def validate(options: dict):
    return is_valid_sharepoint_url(options.get("webUrl"))


def site_groups_url(web_url: str) -> str:
    return f"{web_url}/_api/web/sitegroups"


def associated_groups_url(web_url: str) -> str:
    fields = ",".join(ASSOCIATED_GROUPS)
    return f"{web_url}/_api/web?$expand={fields}&$select={fields}"


def flatten_associated_groups(web: dict) -> list:
    groups = []
    for group_type in ASSOCIATED_GROUPS:
        group = web.get(group_type)
        if group:
            groups.append({**group, "Type": group_type})
    return groups


def execute(client, options: dict):
    web_url = options["webUrl"].rstrip("/")

    if options.get("associatedGroupsOnly"):
        logger.info("Retrieving associated groups of %s...", web_url)
        web = client.get(associated_groups_url(web_url))
        if options.get("output") == "text":
            return flatten_associated_groups(web)
        return web

    logger.info("Retrieving site groups of %s...", web_url)
    return client.get(site_groups_url(web_url))["value"]
