"""
spo-cli term-group-list

Lists the term groups of the default site collection term store.

Usage:
    spo-cli term-group-list
    spo-cli term-group-list --webUrl https://contoso.sharepoint.com --output text
"""

import logging
from enum import IntEnum

from spo.csom import decoder, normalize
from spo.csom.encoder import ActionBatch
from spo.config import TAXONOMY_SESSION_TYPE_ID
from spo.validation import is_valid_sharepoint_url

logger = logging.getLogger(__name__)

NAME = "term-group-list"
DESCRIPTION = "Lists taxonomy term groups from the default term store"
DEFAULT_PROPERTIES = ["Id", "Name"]
OPTION_SETS = []


class Result(IntEnum):
    TERM_GROUPS = 12


def add_arguments(parser):
    parser.add_argument("-u", "--webUrl", help="Site to resolve the term store from (default: admin site)")


def telemetry_properties(options: dict) -> dict:
    return {"webUrl": options.get("webUrl") is not None}


def validate(options: dict):
    if options.get("webUrl"):
        return is_valid_sharepoint_url(options["webUrl"])
    return True


def build_request(application_name: str) -> ActionBatch:
    batch = ActionBatch(application_name)
    batch.static_method(2, "GetTaxonomySession", TAXONOMY_SESSION_TYPE_ID)
    batch.method(5, 2, "GetDefaultSiteCollectionTermStore")
    batch.property(8, 5, "Groups")
    batch.object_path(3, 2)
    batch.identity_query(4, 2)
    batch.object_path(6, 5)
    batch.identity_query(7, 5)
    batch.object_path(9, 8)
    batch.query(
        Result.TERM_GROUPS,
        8,
        child_properties=("Name", "Id", "Description", "CreatedDate", "LastModifiedDate"),
        child_select_all=False,
    )
    return batch


def transform(items: list) -> list:
    return normalize.normalize_collection(
        decoder.result_for(items, Result.TERM_GROUPS),
        date_fields=("CreatedDate", "LastModifiedDate"),
        guid_fields=("Id",),
        defaults={"Description": ""},
    )


def execute(client, options: dict) -> list:
    web_url = client.resolve_web_url(options.get("webUrl"))
    digest = client.get_request_digest(web_url)

    logger.info("Retrieving taxonomy term groups...")
    return transform(client.process_query(web_url, digest, build_request(client.application_name).to_xml()))
