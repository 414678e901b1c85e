"""Tests for certificate detail extraction."""

from __future__ import annotations

import io
from datetime import date

import pytest
from pypdf import PdfWriter

from portfolio_cms.models.errors import ValidationError
from portfolio_cms.models.upload import IncomingFile
from portfolio_cms.services import certificate_details
from portfolio_cms.services.certificate_details import (
    extract_certificate_details,
    extract_pdf_text,
    parse_certificate_text,
    parse_date,
    parse_filename,
)

IBM_CERTIFICATE = """
Certificate of Completion
This is to certify that Ada Lovelace
has successfully completed Python for Data Science on 15-Mar-2024
issued by IBM Skills Network.
Credential ID: ABC123XYZ9
Verify at https://coursera.org/verify/ABC123XYZ9
"""


def _blank_pdf() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=72, height=72)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def test_parse_certificate_text():
    details = parse_certificate_text(IBM_CERTIFICATE)

    assert details.title == "Python for Data Science"
    assert details.issuer == "IBM Skills Network"
    assert details.issue_date == date(2024, 3, 15)
    assert details.expiry_date is None
    assert details.credential_id == "ABC123XYZ9"
    assert details.credential_url == "https://coursera.org/verify/ABC123XYZ9"
    assert details.skills == ["python", "data science"]


def test_split_specialization_url_is_rejoined():
    text = "Verify at coursera.org/verify/specializat ion/QWERTY12345"

    details = parse_certificate_text(text)

    assert details.credential_url == (
        "https://coursera.org/verify/specialization/QWERTY12345"
    )
    assert details.credential_id == "QWERTY12345"


def test_issuer_and_expiry_from_phrasing():
    text = (
        "Awarded by Example Academy on 03/01/2023. "
        "Valid until January 5, 2026."
    )

    details = parse_certificate_text(text)

    assert details.issuer == "Example Academy"
    assert details.issue_date == date(2023, 3, 1)
    assert details.expiry_date == date(2026, 1, 5)


def test_skill_keywords_match_whole_words():
    assert parse_certificate_text("Maintained by a team").skills == []
    assert parse_certificate_text("Intro to AI and SQL").skills == ["ai", "sql"]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("15-Mar-2024", date(2024, 3, 15)),
        ("5-September-2023", date(2023, 9, 5)),
        ("2024/02/29", date(2024, 2, 29)),
        ("March 15, 2024", date(2024, 3, 15)),
        ("13/45/2024", None),
        ("soon", None),
    ],
)
def test_parse_date(value, expected):
    assert parse_date(value) == expected


def test_parse_filename():
    details = parse_filename("Coursera_Python-for-Data-Science_2024-03-15.pdf")

    assert details.issuer == "Coursera"
    assert details.certificate_type == "course"
    assert details.issue_date == date(2024, 3, 15)
    assert details.title == "Coursera Python For Data Science"


def test_parse_filename_month_first_date_and_noise_words():
    details = parse_filename("kubernetes-admin-certificate_03_15_2024.png")

    assert details.issuer == ""
    assert details.certificate_type == "certification"
    assert details.issue_date == date(2024, 3, 15)
    assert details.title == "Kubernetes Admin"


def test_parse_filename_ignores_impossible_date():
    assert parse_filename("aws_2024-13-40.pdf").issue_date is None


def test_extract_pdf_text_tolerates_unreadable_files():
    assert extract_pdf_text(b"definitely not a pdf") == ""
    assert extract_pdf_text(_blank_pdf()).strip() == ""


def test_text_values_win_and_filename_fills_gaps(monkeypatch):
    monkeypatch.setattr(
        certificate_details,
        "extract_pdf_text",
        lambda data: "has successfully completed Deep Learning Basics. Credential ID: DL2024XY",
    )
    upload = IncomingFile("udemy_2023-07-01.pdf", "application/pdf", b"%PDF-1.7")

    details = extract_certificate_details(upload)

    assert details.title == "Deep Learning Basics"
    assert details.credential_id == "DL2024XY"
    assert details.issuer == "Udemy"
    assert details.issue_date == date(2023, 7, 1)
    assert details.certificate_type == "course"


def test_images_use_the_filename_only():
    upload = IncomingFile("google-cloud-digital-leader.png", "image/png", b"\x89PNG")

    details = extract_certificate_details(upload)

    assert details.title == "Google Cloud Digital Leader"
    assert details.issuer == "Google"
    assert details.credential_id == ""


def test_blank_pdf_falls_back_to_filename():
    upload = IncomingFile("microsoft-azure-fundamentals.pdf", "application/pdf", _blank_pdf())

    details = extract_certificate_details(upload)

    assert details.issuer == "Microsoft"
    assert details.title == "Microsoft Azure Fundamentals"


@pytest.mark.parametrize(
    "upload",
    [
        IncomingFile("notes.txt", "text/plain", b"hello"),
        IncomingFile("empty.pdf", "application/pdf", b""),
    ],
)
def test_rejects_unscannable_files(upload):
    with pytest.raises(ValidationError):
        extract_certificate_details(upload)
