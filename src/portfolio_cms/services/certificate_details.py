"""Pull certificate fields out of an uploaded certificate file.

PDF certificates are read with pypdf and their text is matched against
patterns for the usual certificate wording (course title, issuer, dates,
credential ID and verification link). Whatever the text does not yield is
taken from the filename, e.g. ``coursera_machine-learning_2024-03-15.pdf``.
Images carry no text layer, so only their filename is used.
"""

from __future__ import annotations

import io
import logging
import re
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any

from pypdf import PdfReader

from portfolio_cms.models.errors import ValidationError
from portfolio_cms.models.upload import IncomingFile
from portfolio_cms.services.file_service import IMAGE_MIME_TYPES

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
SCANNABLE_MIME_TYPES = IMAGE_MIME_TYPES | {PDF_MIME_TYPE}

_MONTHS = "Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec"
_DAY_MONTH_YEAR = rf"\d{{1,2}}-(?i:{_MONTHS})[a-z]*-\d{{4}}"
_NUMERIC_DATE = r"\d{1,2}[/-]\d{1,2}[/-]\d{4}|\d{4}[/-]\d{1,2}[/-]\d{1,2}"
_WRITTEN_DATE = r"[A-Z][a-z]+ \d{1,2},? \d{4}"
_ANY_DATE = rf"{_DAY_MONTH_YEAR}|{_NUMERIC_DATE}|{_WRITTEN_DATE}"

TITLE_PATTERNS = (
    re.compile(r"(?i:specializat\s*ion)\s+([A-Z][^.!?\n]{10,50}?)\s+(?i:this)\b"),
    re.compile(
        r"(?i:has successfully completed|successfully completed|has been awarded)"
        r"\s+(?i:the\s+)?([A-Z][^.!?\n]{5,80}?)(?:\s+(?i:on|with|this|issued)\b|[.!?]|$)"
    ),
    re.compile(
        r"(?i:certificate of completion|certificate of achievement)"
        r"\s+([A-Z][^.!?\n]{10,50}?)(?:\s+(?i:this)\b|[.!?]|$)"
    ),
    re.compile(r"([A-Z][^.!?\n]{10,50}?)\s+(?:Specialization|Course|Program)\b"),
)

KNOWN_ISSUERS = (
    "IBM Skills Network",
    "IBM",
    "Coursera",
    "Udemy",
    "edX",
    "LinkedIn Learning",
    "Google",
    "Microsoft",
    "Amazon Web Services",
)

ISSUER_PATTERNS = (
    re.compile(
        r"\b((?:University|College|Institute|School) of [A-Z][A-Za-z ]{2,40}?)"
        r"(?=[.,]|$|\s+(?:on|in)\b)"
    ),
    re.compile(
        r"(?i:issued by|awarded by|offered by|provided by)\s+([A-Z][^.!?\n]{1,50}?)"
        r"(?:\s+(?i:on|in)\b|[.,!?]|$)"
    ),
)

ISSUE_DATE_PATTERNS = (
    re.compile(rf"(?i:issued|completed|awarded|date)\D{{0,40}}?({_ANY_DATE})"),
    re.compile(rf"\b({_DAY_MONTH_YEAR})\b"),
)

EXPIRY_DATE_PATTERNS = (
    re.compile(
        r"(?i:expires|expiry date|expiration date|valid until|valid through)"
        rf"\D{{0,20}}?({_ANY_DATE})"
    ),
)

CREDENTIAL_ID_PATTERNS = (
    re.compile(
        r"(?i:credential\s*id|certificate\s*id|certificate\s*no\.?)\s*[:#]?\s*([A-Z0-9-]{6,40})"
    ),
    re.compile(r"(?i:verify/(?:specializat\s*ion/|course/|certificate/)?)([A-Z0-9]{10,20})\b"),
    re.compile(r"\b(?=[A-Z0-9]*\d)([A-Z0-9]{10,20})\s*$"),
)

URL_PATTERNS = (
    re.compile(
        r"((?:https?://)?(?:www\.)?coursera\.org/verify/(?:specializat\s*ion/)?[A-Z0-9]+)",
        re.IGNORECASE,
    ),
    re.compile(r"(https?://\S+)", re.IGNORECASE),
)

SKILL_KEYWORDS = (
    "python",
    "javascript",
    "react",
    "node",
    "machine learning",
    "ai",
    "data science",
    "cloud",
    "aws",
    "azure",
    "docker",
    "kubernetes",
    "sql",
    "database",
    "web development",
    "mobile development",
    "cybersecurity",
    "devops",
    "blockchain",
    "tensorflow",
    "pytorch",
)

# Filename keyword -> (issuer, certificate type)
FILENAME_ISSUERS = (
    ("coursera", "Coursera", "course"),
    ("udemy", "Udemy", "course"),
    ("google", "Google", "certification"),
    ("microsoft", "Microsoft", "certification"),
    ("aws", "Amazon Web Services", "certification"),
    ("amazon", "Amazon Web Services", "certification"),
)

_FILENAME_DATE = re.compile(
    r"(?P<y1>\d{4})[-_](?P<m1>\d{1,2})[-_](?P<d1>\d{1,2})"
    r"|(?P<m2>\d{1,2})[-_](?P<d2>\d{1,2})[-_](?P<y2>\d{4})"
)
_FILENAME_NOISE = {"certificate", "cert", "certification"}
_DATE_FORMATS = (
    "%d-%b-%Y",
    "%d-%B-%Y",
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%B %d, %Y",
    "%B %d %Y",
    "%b %d, %Y",
    "%b %d %Y",
)


@dataclass
class CertificateDetails:
    """Fields recovered from a certificate file; empty when not found."""

    title: str = ""
    issuer: str = ""
    issue_date: date | None = None
    expiry_date: date | None = None
    credential_id: str = ""
    credential_url: str = ""
    skills: list[str] = field(default_factory=list)
    certificate_type: str = "certification"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def parse_date(value: str) -> date | None:
    """Parse the date spellings certificates use; None when unrecognized."""
    value = value.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def _first_group(patterns: tuple[re.Pattern[str], ...], text: str) -> str:
    for pattern in patterns:
        match = pattern.search(text)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return ""


def _first_date(patterns: tuple[re.Pattern[str], ...], text: str) -> date | None:
    for pattern in patterns:
        for match in pattern.finditer(text):
            parsed = parse_date(match.group(1))
            if parsed is not None:
                return parsed
    return None


def _find_issuer(text: str) -> str:
    for issuer in KNOWN_ISSUERS:
        if re.search(rf"\b{re.escape(issuer)}\b", text, re.IGNORECASE):
            return issuer
    return _first_group(ISSUER_PATTERNS, text)


def _find_url(text: str) -> str:
    for pattern in URL_PATTERNS:
        match = pattern.search(text)
        if match:
            url = re.sub(r"specializat\s+ion", "specialization", match.group(1))
            url = re.sub(r"\s+", "", url).rstrip(".,;)")
            if not url.lower().startswith("http"):
                url = f"https://{url}"
            return url
    return ""


def parse_certificate_text(text: str) -> CertificateDetails:
    """Match the certificate wording in ``text`` against the known patterns."""
    clean = re.sub(r"[^\x20-\x7E]", " ", text)
    clean = re.sub(r"\s+", " ", clean).strip()
    lowered = clean.lower()

    details = CertificateDetails(
        title=_first_group(TITLE_PATTERNS, clean),
        issuer=_find_issuer(clean),
        issue_date=_first_date(ISSUE_DATE_PATTERNS, clean),
        expiry_date=_first_date(EXPIRY_DATE_PATTERNS, clean),
        credential_id=_first_group(CREDENTIAL_ID_PATTERNS, clean),
        credential_url=_find_url(clean),
        skills=[k for k in SKILL_KEYWORDS if re.search(rf"\b{re.escape(k)}\b", lowered)],
    )
    logger.debug("Parsed certificate text: %s", details)
    return details


def parse_filename(filename: str) -> CertificateDetails:
    """Guess the title, issuer, type and issue date from a file's name."""
    stem = re.sub(r"\.(pdf|jpe?g|png|gif|webp|svg)$", "", filename.lower())
    details = CertificateDetails()

    for keyword, issuer, certificate_type in FILENAME_ISSUERS:
        if keyword in stem:
            details.issuer = issuer
            details.certificate_type = certificate_type
            break

    match = _FILENAME_DATE.search(stem)
    if match:
        year = match.group("y1") or match.group("y2")
        month = match.group("m1") or match.group("m2")
        day = match.group("d1") or match.group("d2")
        try:
            details.issue_date = date(int(year), int(month), int(day))
        except ValueError:
            logger.debug("Ignoring impossible date in filename %s", filename)
        stem = stem[: match.start()] + stem[match.end() :]

    words = [w for w in re.split(r"[-_\s]+", stem) if w and w not in _FILENAME_NOISE]
    details.title = " ".join(word.capitalize() for word in words)
    return details


def extract_pdf_text(data: bytes) -> str:
    """Return the text layer of a PDF, or an empty string if it cannot be read."""
    try:
        reader = PdfReader(io.BytesIO(data))
        return "\n".join(page.extract_text() or "" for page in reader.pages)
    except Exception as exc:
        logger.warning("Could not read PDF text: %s", exc)
        return ""


def extract_certificate_details(file: IncomingFile) -> CertificateDetails:
    """Extract certificate fields from a PDF or image upload.

    Text-derived values win; the filename fills any field the text left
    empty and always decides the certificate type.

    Raises:
        ValidationError: If the file is empty or neither a PDF nor an image.
    """
    if not file.data:
        raise ValidationError("No file uploaded")
    if file.mime_type not in SCANNABLE_MIME_TYPES:
        raise ValidationError("Only PDF and image files can be scanned for details")

    details = CertificateDetails()
    if file.mime_type == PDF_MIME_TYPE:
        text = extract_pdf_text(file.data)
        if text.strip():
            details = parse_certificate_text(text)

    from_name = parse_filename(file.original_name)
    details.title = details.title or from_name.title
    details.issuer = details.issuer or from_name.issuer
    details.issue_date = details.issue_date or from_name.issue_date
    details.certificate_type = from_name.certificate_type
    logger.info("Extracted certificate details from %s", file.original_name)
    return details
