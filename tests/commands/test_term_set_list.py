"""Tests for the term-set-list command."""

import json

import pytest

from spo.cli import run_command
from spo.commands import term_set_list
from spo.errors import ServerError, ValidationError
from tests.conftest import ADMIN_URL, DIGEST, PROCESS_QUERY, WEB_URL, error_response, header

TERM_GROUP_ID = "11111111-1111-1111-1111-111111111111"

TERM_SETS_RESPONSE = [
    header(),
    55, {"IsNull": False},
    56, {"_ObjectIdentity_": "session", "_ObjectType_": "SP.Taxonomy.TaxonomySession"},
    58, {"IsNull": False},
    59, {"_ObjectIdentity_": "store", "_ObjectType_": "SP.Taxonomy.TermStore"},
    61, {"IsNull": False},
    63, {"IsNull": False},
    64, {"_ObjectIdentity_": "group", "_ObjectType_": "SP.Taxonomy.TermGroup"},
    66, {"IsNull": False},
    67, {
        "_ObjectType_": "SP.Taxonomy.TermSetCollection",
        "_Child_Items_": [
            {
                "_ObjectType_": "SP.Taxonomy.TermSet",
                "_ObjectIdentity_": "set-1",
                "CreatedDate": "/Date(1536839573337)/",
                "Id": "/Guid(7a167c47-2b37-41d0-94d0-e962c1a4f2ed)/",
                "LastModifiedDate": "/Date(1536839573337)/",
                "Name": "PnP-CollabFooter-SharedLinks",
                "Description": "",
                "IsOpenForTermCreation": True,
            },
            {
                "_ObjectType_": "SP.Taxonomy.TermSet",
                "_ObjectIdentity_": "set-2",
                "CreatedDate": "/Date(0)/",
                "Id": "/Guid(1ba2f19b-d5e4-4c1f-8b0c-1fc8e7e9a4d2)/",
                "LastModifiedDate": "/Date(1000)/",
                "Name": "PnP-Organizations",
                "Description": "Orgs",
                "IsOpenForTermCreation": False,
            },
        ],
    },
]

EMPTY_RESPONSE = TERM_SETS_RESPONSE[:-1] + [
    {"_ObjectType_": "SP.Taxonomy.TermSetCollection", "_Child_Items_": []}
]


@pytest.fixture
def process_query(requests_mock, digest):
    def register(items, base_url=WEB_URL):
        body = items if isinstance(items, str) else json.dumps(items)
        return requests_mock.post(f"{base_url}{PROCESS_QUERY}", text=body)
    return register


class TestValidate:
    def test_invalid_web_url(self):
        assert term_set_list.validate({"webUrl": "foo", "termGroupName": "x"}) is not True

    def test_valid_web_url(self):
        assert term_set_list.validate({"webUrl": "https://contoso.sharepoint.com", "termGroupName": "x"}) is True

    def test_invalid_term_group_id(self):
        assert term_set_list.validate({"termGroupId": "invalid"}) == "invalid is not a valid GUID"

    def test_valid_term_group_id(self):
        assert term_set_list.validate({"termGroupId": TERM_GROUP_ID}) is True


class TestBuildRequest:
    def test_by_id_embeds_guid_parameter(self):
        xml = term_set_list.build_request({"termGroupId": TERM_GROUP_ID}, "spo-test").to_xml()
        assert '<Method Id="62" ParentId="60" Name="GetById"><Parameters>' in xml
        assert f'<Parameter Type="Guid">{{{TERM_GROUP_ID}}}</Parameter>' in xml

    def test_by_name_escapes(self):
        xml = term_set_list.build_request({"termGroupName": "R&D <terms>"}, "spo-test").to_xml()
        assert 'Name="GetByName"' in xml
        assert '<Parameter Type="String">R&amp;D &lt;terms&gt;</Parameter>' in xml

    def test_loads_term_set_child_items(self):
        xml = term_set_list.build_request({"termGroupId": TERM_GROUP_ID}, "spo-test").to_xml()
        assert '<Property Id="65" ParentId="62" Name="TermSets" />' in xml
        assert '<Query Id="67" ObjectPathId="65">' in xml


class TestExecute:
    def test_request_body_contains_term_group_guid(self, client, process_query, requests_mock):
        process_query(TERM_SETS_RESPONSE)

        term_set_list.execute(client, {"webUrl": WEB_URL, "termGroupId": TERM_GROUP_ID})

        request = requests_mock.last_request
        assert request.headers["X-RequestDigest"] == DIGEST
        assert '<Parameter Type="Guid">{11111111-1111-1111-1111-111111111111}</Parameter>' in request.text

    def test_lists_normalized_term_sets(self, client, process_query):
        process_query(TERM_SETS_RESPONSE)

        result = term_set_list.execute(client, {"webUrl": WEB_URL, "termGroupName": "PnPTermSets"})

        assert result == [
            {
                "CreatedDate": "2018-09-13T11:52:53.337Z",
                "Id": "7a167c47-2b37-41d0-94d0-e962c1a4f2ed",
                "LastModifiedDate": "2018-09-13T11:52:53.337Z",
                "Name": "PnP-CollabFooter-SharedLinks",
                "Description": "",
                "IsOpenForTermCreation": True,
            },
            {
                "CreatedDate": "1970-01-01T00:00:00.000Z",
                "Id": "1ba2f19b-d5e4-4c1f-8b0c-1fc8e7e9a4d2",
                "LastModifiedDate": "1970-01-01T00:00:01.000Z",
                "Name": "PnP-Organizations",
                "Description": "Orgs",
                "IsOpenForTermCreation": False,
            },
        ]

    def test_no_term_sets_returns_none(self, client, process_query):
        process_query(EMPTY_RESPONSE)
        assert term_set_list.execute(client, {"webUrl": WEB_URL, "termGroupId": TERM_GROUP_ID}) is None

    def test_defaults_to_admin_site(self, client, process_query, requests_mock):
        process_query(TERM_SETS_RESPONSE, base_url=ADMIN_URL)

        term_set_list.execute(client, {"termGroupId": TERM_GROUP_ID})

        assert requests_mock.last_request.url == f"{ADMIN_URL}{PROCESS_QUERY}"

    def test_server_error(self, client, process_query):
        process_query(error_response("Specified argument was out of the range of valid values."))
        with pytest.raises(ServerError, match="Specified argument was out of the range"):
            term_set_list.execute(client, {"webUrl": WEB_URL, "termGroupName": "Missing"})


class TestRunCommand:
    def test_requires_one_term_group_option(self, client, requests_mock):
        with pytest.raises(ValidationError, match="termGroupId, termGroupName"):
            run_command("term-set-list", {"termGroupId": None, "termGroupName": None}, client=client)
        assert requests_mock.call_count == 0

    def test_empty_term_group_id_is_rejected(self, client, requests_mock):
        with pytest.raises(ValidationError, match="termGroupId, termGroupName"):
            run_command("term-set-list", {"termGroupId": "", "termGroupName": None}, client=client)
        assert requests_mock.call_count == 0

    def test_empty_term_group_id_is_not_a_guid(self):
        assert term_set_list.validate({"termGroupId": ""}) == " is not a valid GUID"

    def test_rejects_both_term_group_options(self, client, requests_mock):
        with pytest.raises(ValidationError, match="but not multiple"):
            run_command(
                "term-set-list",
                {"termGroupId": TERM_GROUP_ID, "termGroupName": "PnPTermSets"},
                client=client,
            )
        assert requests_mock.call_count == 0

    def test_records_telemetry(self, client, process_query, telemetry):
        process_query(TERM_SETS_RESPONSE)

        run_command(
            "term-set-list",
            {"webUrl": WEB_URL, "termGroupId": TERM_GROUP_ID, "termGroupName": None},
            client=client,
            telemetry=telemetry,
        )

        assert telemetry.events == [
            ("term-set-list", {"webUrl": True, "termGroupId": True, "termGroupName": False})
        ]
