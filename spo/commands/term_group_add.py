"""
spo-cli term-group-add

Adds a term group to the default site collection term store.

Three ProcessQuery round trips, each independent on the server:
    1. resolve the default term store
    2. CreateGroup(name, id) on that store
    3. set Description (only when --description is given)

A failure in step 3 leaves the group from step 2 in place without its
description. Nothing is rolled back.

Usage:
    spo-cli term-group-add --name PnPTermSets
    spo-cli term-group-add --name PnPTermSets --id 9e54299e-208a-4000-8546-cc4139091b26 \\
        --description "Term sets for PnP" --webUrl https://contoso.sharepoint.com
"""

import logging
import uuid
from enum import IntEnum

import requests

from spo.csom import decoder, normalize
from spo.csom.encoder import ActionBatch, guid, string
from spo.config import TAXONOMY_SESSION_TYPE_ID
from spo.errors import CommandError
from spo.validation import is_valid_guid, is_valid_sharepoint_url

logger = logging.getLogger(__name__)

NAME = "term-group-add"
DESCRIPTION = "Adds taxonomy term group"
DEFAULT_PROPERTIES = None
OPTION_SETS = []


class Result(IntEnum):
    TERM_STORE = 9
    TERM_GROUP = 16


def add_arguments(parser):
    parser.add_argument("-n", "--name", required=True, help="Name of the term group to add")
    parser.add_argument("-i", "--id", help="ID of the term group to add (default: new GUID)")
    parser.add_argument("-d", "--description", help="Description of the term group")
    parser.add_argument("-u", "--webUrl", help="Site to resolve the term store from (default: admin site)")


def telemetry_properties(options: dict) -> dict:
    return {
        "description": options.get("description") is not None,
        "id": options.get("id") is not None,
        "webUrl": options.get("webUrl") is not None,
    }


def validate(options: dict):
    if options.get("id") is not None and not is_valid_guid(options["id"]):
        return f"{options['id']} is not a valid GUID"

    if options.get("webUrl"):
        return is_valid_sharepoint_url(options["webUrl"])

    return True


# =============================================================================
# REQUESTS
# =============================================================================


def build_term_store_request(application_name: str) -> ActionBatch:
    batch = ActionBatch(application_name)
    batch.static_method(3, "GetTaxonomySession", TAXONOMY_SESSION_TYPE_ID)
    batch.method(6, 3, "GetDefaultSiteCollectionTermStore")
    batch.object_path(4, 3)
    batch.identity_query(5, 3)
    batch.object_path(7, 6)
    batch.identity_query(8, 6)
    batch.query(Result.TERM_STORE, 6, select_all=True)
    return batch


def build_create_group_request(
    application_name: str, term_store_identity: str, name: str, term_group_id: str
) -> ActionBatch:
    batch = ActionBatch(application_name)
    batch.identity(6, term_store_identity)
    batch.method(13, 6, "CreateGroup", [string(name), guid(term_group_id)])
    batch.object_path(14, 13)
    batch.identity_query(15, 13)
    batch.query(Result.TERM_GROUP, 13, properties=("Name", "Id", "Description"))
    return batch


def build_set_description_request(
    application_name: str, term_group_identity: str, description: str
) -> ActionBatch:
    batch = ActionBatch(application_name)
    batch.identity(45, term_group_identity)
    batch.set_property(51, 45, "Description", string(description))
    return batch


def transform(term_group: dict, description: str = None) -> dict:
    record = normalize.normalize_entity(term_group, guid_fields=("Id",))
    record["Description"] = description or ""
    return record


# =============================================================================
# EXECUTION
# =============================================================================


def execute(client, options: dict) -> dict:
    web_url = client.resolve_web_url(options.get("webUrl"))
    digest = client.get_request_digest(web_url)
    app_name = client.application_name

    logger.info("Getting taxonomy term store...")
    items = client.process_query(web_url, digest, build_term_store_request(app_name).to_xml())
    term_store = decoder.result_for(items, Result.TERM_STORE)

    term_group_id = options.get("id") or str(uuid.uuid4())

    logger.info("Adding taxonomy term group...")
    body = build_create_group_request(
        app_name, term_store["_ObjectIdentity_"], options["name"], term_group_id
    ).to_xml()
    items = client.process_query(web_url, digest, body)
    term_group = decoder.result_for(items, Result.TERM_GROUP)

    description = options.get("description")
    if description:
        logger.info("Setting taxonomy term group description...")
        body = build_set_description_request(
            app_name, term_group["_ObjectIdentity_"], description
        ).to_xml()
        try:
            client.process_query(web_url, digest, body)
        except (CommandError, requests.RequestException):
            logger.warning(
                "Term group %s (%s) was created but its description could not be set",
                options["name"],
                term_group_id,
            )
            raise

    return transform(term_group, description)
