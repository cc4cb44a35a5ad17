"""
Legistar OData discovery client.

Finds PDF attachments on San Francisco Board of Supervisors matters.
The OData v3 endpoint has no substring filter, so the most recent
matters are fetched in one call and filtered client-side.

Dependencies: requests, tenacity, zoning_search.core.document_processing.models
System role: Discovery collaborator (search terms -> PDF URLs)
"""

import logging
from collections.abc import Iterable
from typing import Any

import requests

from zoning_search.core.document_processing.models import DiscoveredPdf
from zoning_search.core.exceptions import DiscoveryError

from .base_client import BaseServiceClient

logger = logging.getLogger(__name__)

# Checked in order; first keyword hit wins.
ATTACHMENT_TYPES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("eir", "environmental impact"), "EIR"),
    (("staff report", "staff_report"), "Staff Report"),
    (("ordinance",), "Ordinance"),
    (("resolution",), "Resolution"),
    (("planning", "commission"), "Planning Commission"),
    (("noise",), "Noise Study"),
    (("traffic", "transportation"), "Traffic Study"),
    (("shadow",), "Shadow Analysis"),
    (("geotech",), "Geotechnical Report"),
    (("ceqa",), "CEQA Document"),
    (("hearing", "notice"), "Public Notice"),
    (("executive summary",), "Executive Summary"),
    (("motion",), "Motion"),
    (("amendment",), "Amendment"),
)
DEFAULT_ATTACHMENT_TYPE = "Attachment"


def classify_attachment(name_or_url: str) -> str:
    """Map an attachment name (or URL) to a document type by keyword."""
    lower = (name_or_url or "").lower()
    for keywords, attachment_type in ATTACHMENT_TYPES:
        if any(keyword in lower for keyword in keywords):
            return attachment_type
    return DEFAULT_ATTACHMENT_TYPE


def _unwrap(payload: Any) -> list[dict]:
    # Legistar returns a bare array; some proxies wrap it as {"value": [...]}.
    if isinstance(payload, list):
        items = payload
    elif isinstance(payload, dict):
        items = payload.get("value") or []
    else:
        items = []
    return [item for item in items if isinstance(item, dict)]


class LegistarDiscoveryClient(BaseServiceClient):
    """Discover zoning and environmental review PDFs on Legistar matters."""

    service_name = "legistar"
    error_cls = DiscoveryError

    def __init__(
        self,
        odata_base: str = "https://webapi.legistar.com/v1/sfgov",
        matter_scan_limit: int = 500,
        default_search_terms: Iterable[str] | None = None,
        default_limit: int = 20,
        timeout_seconds: float = 30.0,
        max_retries: int = 3,
        retry_base_delay_seconds: float = 1.0,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(timeout_seconds, max_retries, retry_base_delay_seconds, session)
        self._odata_base = odata_base.rstrip("/")
        self._matter_scan_limit = matter_scan_limit
        self._default_search_terms = list(default_search_terms or [])
        self._default_limit = default_limit

    def discover(
        self,
        search_terms: Iterable[str] | None = None,
        file_numbers: Iterable[str] | None = None,
        limit: int | None = None,
    ) -> list[DiscoveredPdf]:
        """
        Find PDF attachments on matching matters.

        Explicit file numbers select matters by exact MatterFile; otherwise
        a matter matches when any search term is a case-insensitive
        substring of its title, name or type name.

        Args:
            search_terms: Terms to match (defaults to the configured terms)
            file_numbers: Explicit case identifiers; take precedence over terms
            limit: Maximum PDFs returned (defaults to the configured limit)

        Returns:
            list[DiscoveredPdf]: At most ``limit`` PDFs, newest matters first

        Raises:
            DiscoveryError: When the matter listing cannot be fetched
        """
        limit = self._default_limit if limit is None else limit
        if limit < 1:
            return []

        matters = self._fetch_matters()
        wanted_files = {number.strip() for number in file_numbers or [] if number and number.strip()}
        terms = [term.lower() for term in (search_terms or self._default_search_terms) if term]

        if wanted_files:
            selected = [m for m in matters if str(m.get("MatterFile") or "") in wanted_files]
        else:
            selected = [m for m in matters if self._matches_terms(m, terms)]

        logger.info(
            f"{__name__}:discover - {len(selected)} of {len(matters)} matters matched",
            extra={"file_numbers": sorted(wanted_files), "search_terms": terms},
        )

        discovered: list[DiscoveredPdf] = []
        for matter in selected:
            if len(discovered) >= limit:
                break
            try:
                attachments = self._fetch_attachments(matter.get("MatterId"))
            except DiscoveryError as e:
                logger.warning(
                    f"{__name__}:discover - Skipping attachments for matter {matter.get('MatterId')}: {e}"
                )
                continue

            for attachment in attachments:
                if len(discovered) >= limit:
                    break
                pdf = self._to_discovered_pdf(matter, attachment)
                if pdf is not None:
                    discovered.append(pdf)

        logger.info(f"{__name__}:discover - Discovered {len(discovered)} PDF attachments")
        return discovered

    def _fetch_matters(self) -> list[dict]:
        payload = self._request_json(
            "GET",
            f"{self._odata_base}/Matters",
            "fetch_matters",
            params={"$orderby": "MatterIntroDate desc", "$top": self._matter_scan_limit},
        )
        return _unwrap(payload)

    def _fetch_attachments(self, matter_id: Any) -> list[dict]:
        if matter_id is None:
            return []
        payload = self._request_json(
            "GET",
            f"{self._odata_base}/Matters/{matter_id}/Attachments",
            "fetch_attachments",
        )
        return _unwrap(payload)

    @staticmethod
    def _matches_terms(matter: dict, terms: list[str]) -> bool:
        haystacks = [
            str(matter.get(field) or "").lower()
            for field in ("MatterTitle", "MatterName", "MatterTypeName")
        ]
        return any(term in haystack for term in terms for haystack in haystacks)

    @staticmethod
    def _to_discovered_pdf(matter: dict, attachment: dict) -> DiscoveredPdf | None:
        url = attachment.get("MatterAttachmentHyperlink") or ""
        file_name = (
            attachment.get("MatterAttachmentFileName") or attachment.get("MatterAttachmentName") or ""
        )
        if not url or (".pdf" not in url.lower() and ".pdf" not in file_name.lower()):
            return None

        title = attachment.get("MatterAttachmentName") or file_name
        return DiscoveredPdf(
            url=url,
            title=title,
            file_number=str(matter.get("MatterFile") or ""),
            attachment_type=classify_attachment(title),
            metadata={
                "matter_id": matter.get("MatterId"),
                "matter_title": matter.get("MatterTitle"),
                "matter_type": matter.get("MatterTypeName"),
                "matter_status": matter.get("MatterStatusName"),
                "intro_date": matter.get("MatterIntroDate"),
                "body_name": matter.get("MatterBodyName"),
            },
        )
