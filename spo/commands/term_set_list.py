"""
spo-cli term-set-list

Lists the term sets of one term group in the default site collection term
store. The group is chosen by --termGroupId or --termGroupName (exactly one).

Usage:
    spo-cli term-set-list --termGroupId 0e8f395e-ff58-4d45-9ff7-e331ab728beb
    spo-cli term-set-list --termGroupName PnPTermSets --webUrl https://contoso.sharepoint.com
"""

import logging
from enum import IntEnum

from spo.csom import decoder, normalize
from spo.csom.encoder import ActionBatch, guid, string
from spo.config import TAXONOMY_SESSION_TYPE_ID
from spo.validation import is_valid_guid, is_valid_sharepoint_url

logger = logging.getLogger(__name__)

NAME = "term-set-list"
DESCRIPTION = "Lists taxonomy term sets from the given term group"
DEFAULT_PROPERTIES = ["Id", "Name"]
OPTION_SETS = [("termGroupId", "termGroupName")]

DATE_FIELDS = ("CreatedDate", "LastModifiedDate")
GUID_FIELDS = ("Id",)


class Result(IntEnum):
    TERM_SETS = 67


def add_arguments(parser):
    parser.add_argument("-u", "--webUrl", help="Site to resolve the term store from (default: admin site)")
    parser.add_argument("--termGroupId", help="ID of the term group")
    parser.add_argument("--termGroupName", help="Name of the term group")


def telemetry_properties(options: dict) -> dict:
    return {
        "webUrl": options.get("webUrl") is not None,
        "termGroupId": options.get("termGroupId") is not None,
        "termGroupName": options.get("termGroupName") is not None,
    }


def validate(options: dict):
    if options.get("webUrl"):
        valid_url = is_valid_sharepoint_url(options["webUrl"])
        if valid_url is not True:
            return valid_url

    if options.get("termGroupId") is not None and not is_valid_guid(options["termGroupId"]):
        return f"{options['termGroupId']} is not a valid GUID"

    return True


def build_request(options: dict, application_name: str) -> ActionBatch:
    batch = ActionBatch(application_name)
    batch.static_method(54, "GetTaxonomySession", TAXONOMY_SESSION_TYPE_ID)
    batch.method(57, 54, "GetDefaultSiteCollectionTermStore")
    batch.property(60, 57, "Groups")
    if options.get("termGroupId"):
        batch.method(62, 60, "GetById", [guid(options["termGroupId"])])
    else:
        batch.method(62, 60, "GetByName", [string(options["termGroupName"])])
    batch.property(65, 62, "TermSets")

    batch.object_path(55, 54)
    batch.identity_query(56, 54)
    batch.object_path(58, 57)
    batch.identity_query(59, 57)
    batch.object_path(61, 60)
    batch.object_path(63, 62)
    batch.identity_query(64, 62)
    batch.object_path(66, 65)
    batch.query(
        Result.TERM_SETS,
        65,
        child_properties=("Name", "Id"),
        child_select_all=True,
    )
    return batch


def transform(items: list):
    """Term sets from the response, or None when the group has none."""
    term_sets = normalize.normalize_collection(
        decoder.result_for(items, Result.TERM_SETS),
        date_fields=DATE_FIELDS,
        guid_fields=GUID_FIELDS,
    )
    return term_sets or None


def execute(client, options: dict):
    web_url = client.resolve_web_url(options.get("webUrl"))
    digest = client.get_request_digest(web_url)

    logger.info("Retrieving taxonomy term sets...")
    body = build_request(options, client.application_name).to_xml()
    return transform(client.process_query(web_url, digest, body))
