"""DreamHost DNS provider implementation."""

import logging

import httpx

from dreamdns.errors import ProviderError, ProviderQueryFailed
from dreamdns.models import ProviderRecord
from dreamdns.providers.base import DNSProvider

logger = logging.getLogger(__name__)

# Column order of a dns-list_records row.
RECORD_COLUMNS = ("account_id", "zone", "record", "type", "value", "comment", "editable")
REQUIRED_COLUMNS = 5


def split_response(text: str) -> tuple[str, list[str]]:
    """Split a response body into its status token and the remaining lines."""
    lines = text.strip().splitlines()
    if not lines:
        return "", []
    return lines[0].strip(), lines[1:]


def parse_record_list(text: str) -> list[ProviderRecord]:
    """Parse a dns-list_records response body.

    The first line is the status token. Rows are tab-separated in
    RECORD_COLUMNS order; trailing columns may be missing.

    Raises:
        ProviderQueryFailed: If the body is empty or its status is not success
    """
    status, lines = split_response(text)
    if not status:
        raise ProviderQueryFailed("DNS query failed: empty response")
    if status != "success":
        reason = lines[0].strip() if lines else status
        raise ProviderQueryFailed(f"DNS query failed: {reason}")

    records = []
    for line in lines:
        if not line.strip():
            continue
        cells = [cell.strip() for cell in line.split("\t")]
        if cells[0] == RECORD_COLUMNS[0]:
            continue  # header
        if len(cells) < REQUIRED_COLUMNS:
            logger.warning("Skipping malformed record: %r", line)
            continue

        row = dict(zip(RECORD_COLUMNS, cells))
        records.append(
            ProviderRecord(
                account_id=row["account_id"],
                zone=row["zone"],
                hostname=row["record"],
                type=row["type"],
                value=row["value"],
                comment=row.get("comment", ""),
                editable=row.get("editable", "1") != "0",
            )
        )

    return records


class DreamHostProvider(DNSProvider):
    """DNS provider implementation for the DreamHost API."""

    BASE_URL = "https://api.dreamhost.com/"

    def __init__(self, api_key: str, base_url: str | None = None, timeout: float = 30.0):
        """Initialize DreamHost provider.

        Args:
            api_key: DreamHost API key with dns-* permissions
            base_url: API endpoint, defaults to BASE_URL
            timeout: Per-request timeout in seconds
        """
        self.api_key = api_key
        self.client = httpx.Client(
            base_url=base_url or self.BASE_URL,
            headers={"Accept": "text/plain"},
            timeout=timeout,
        )

    def _call(self, cmd: str, **params: str) -> str:
        """Issue one API command and return the raw response body."""
        logger.debug("DreamHost API call %s %s", cmd, params)
        response = self.client.get(
            "/", params={"key": self.api_key, "cmd": cmd, **params}
        )
        response.raise_for_status()
        return response.text

    def list_records(self) -> list[ProviderRecord]:
        """List all DNS records on the account."""
        try:
            body = self._call("dns-list_records")
        except httpx.HTTPError as e:
            raise ProviderQueryFailed(f"DNS query failed: {e}") from e
        return parse_record_list(body)

    def _mutate(self, cmd: str, **params: str) -> None:
        try:
            body = self._call(cmd, **params)
        except httpx.HTTPError as e:
            raise ProviderError(str(e)) from e

        status, lines = split_response(body)
        if status != "success":
            code = lines[0].strip() if lines else (status or "empty_response")
            raise ProviderError(code)

    def add_record(
        self, hostname: str, record_type: str, value: str, comment: str | None = None
    ) -> None:
        """Create a DNS record."""
        params = {"record": hostname, "type": record_type, "value": value}
        if comment:
            params["comment"] = comment
        self._mutate("dns-add_record", **params)

    def remove_record(self, hostname: str, record_type: str, value: str) -> None:
        """Remove the record exactly matching hostname, type and value."""
        self._mutate("dns-remove_record", record=hostname, type=record_type, value=value)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "DreamHostProvider":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
