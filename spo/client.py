"""
SharePoint Online Client

Thin transport over `requests` for the two surfaces the commands use:
    - REST:          GET {web}/_api/...
    - CSOM:          POST {web}/_vti_bin/client.svc/ProcessQuery
plus the form digest (POST {web}/_api/contextinfo) every CSOM call needs.

Network failures (requests.RequestException) propagate unchanged. HTTP
error responses carrying an OData error body become CommandError with the
server's message. Nothing is retried.
"""

import logging

import requests

from spo import config
from spo.csom import decoder
from spo.errors import CommandError

logger = logging.getLogger(__name__)

JSON_NOMETADATA = "application/json;odata=nometadata"
PROCESS_QUERY_PATH = "/_vti_bin/client.svc/ProcessQuery"
CONTEXT_INFO_PATH = "/_api/contextinfo"


def odata_error_message(response: requests.Response):
    """Pull the human-readable message out of an OData error body."""
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None

    error = data.get("odata.error") or data.get("error")
    if not isinstance(error, dict):
        return None

    message = error.get("message")
    if isinstance(message, dict):
        return message.get("value")
    return message


def admin_url(spo_url: str) -> str:
    """https://contoso.sharepoint.com -> https://contoso-admin.sharepoint.com"""
    return spo_url.replace(".sharepoint.", "-admin.sharepoint.", 1)


class SpoClient:
    """Minimal SharePoint Online client for REST and CSOM calls."""

    def __init__(self, access_token: str = None, spo_url: str = None, application_name: str = None):
        self.access_token = access_token if access_token is not None else config.get_access_token()
        self.spo_url = spo_url if spo_url is not None else config.get_spo_url()
        self.application_name = application_name or config.get_application_name()

    def _headers(self, extra: dict = None) -> dict:
        headers = {"Accept": JSON_NOMETADATA}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        if extra:
            headers.update(extra)
        return headers

    def _raise_for_status(self, response: requests.Response):
        if response.ok:
            return
        message = odata_error_message(response)
        if message:
            raise CommandError(message)
        response.raise_for_status()

    # -------------------------------------------------------------------------
    # context
    # -------------------------------------------------------------------------

    def get_spo_admin_url(self) -> str:
        if not self.spo_url:
            raise CommandError(
                "SharePoint Online URL not configured. Set SPO_URL, e.g. https://contoso.sharepoint.com"
            )
        url = admin_url(self.spo_url)
        logger.debug("Resolved SharePoint admin URL: %s", url)
        return url

    def resolve_web_url(self, web_url: str = None) -> str:
        """Use the given site, falling back to the tenant admin site."""
        return web_url.rstrip("/") if web_url else self.get_spo_admin_url()

    def get_request_digest(self, web_url: str) -> str:
        """Fetch a form digest for mutating requests against `web_url`."""
        url = f"{web_url}{CONTEXT_INFO_PATH}"
        logger.debug("Requesting form digest from %s", url)
        response = requests.post(url, headers=self._headers())
        self._raise_for_status(response)
        return response.json()["FormDigestValue"]

    # -------------------------------------------------------------------------
    # transport
    # -------------------------------------------------------------------------

    def get(self, url: str):
        """GET a REST endpoint and return the decoded JSON body."""
        logger.debug("GET %s", url)
        response = requests.get(url, headers=self._headers())
        self._raise_for_status(response)
        return response.json()

    def process_query(self, web_url: str, digest: str, body: str) -> list:
        """POST an action batch and return the checked response array."""
        url = f"{web_url}{PROCESS_QUERY_PATH}"
        logger.debug("POST %s\n%s", url, body)
        response = requests.post(
            url,
            headers=self._headers({"X-RequestDigest": digest, "Content-Type": "text/xml"}),
            data=body.encode("utf-8"),
        )
        self._raise_for_status(response)
        logger.debug("ProcessQuery response: %s", response.text)

        items = decoder.parse_response(response.text)
        decoder.check_response(items)
        return items
