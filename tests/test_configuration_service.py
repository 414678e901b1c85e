"""Tests for the site configuration service."""

from __future__ import annotations

import pytest

from portfolio_cms.models.errors import ValidationError
from portfolio_cms.services.audit import get_audit_entries
from portfolio_cms.services.configuration import (
    DEFAULT_CONFIGURATION,
    get_configuration,
    reset_configuration,
    update_configuration,
)
from portfolio_cms.services.content import update_about

pytestmark = pytest.mark.usefixtures("tmp_db")


def test_first_read_creates_defaults():
    config = get_configuration()

    assert config["theme"] == DEFAULT_CONFIGURATION["theme"]
    assert [item["name"] for item in config["navigation"]][:2] == ["Home", "About"]
    assert config["settings"]["maintenance_mode"] is False
    assert get_configuration()["id"] == config["id"]


def test_defaults_are_seeded_from_about():
    update_about(
        {
            "name": "Ada Lovelace",
            "title": "Analyst",
            "email": "ada@example.com",
            "social_links": {"github": "https://github.com/ada"},
        }
    )

    config = get_configuration()

    assert config["site_info"]["name"] == "Ada Lovelace"
    assert config["contact_info"]["email"] == "ada@example.com"
    assert config["social_links"]["github"] == "https://github.com/ada"
    assert config["seo"]["title"] == "Ada Lovelace - Portfolio"
    assert config["footer"]["brand_name"] == "Ada Lovelace"


def test_update_merges_keys_within_a_section():
    updated = update_configuration({"theme": {"primary_color": "#000000"}}, user_id=1)

    assert updated["theme"]["primary_color"] == "#000000"
    assert updated["theme"]["text_color"] == DEFAULT_CONFIGURATION["theme"]["text_color"]
    assert get_configuration()["theme"]["primary_color"] == "#000000"
    assert get_audit_entries("configuration", updated["id"], 10)[0]["action"] == (
        "UPDATE_CONFIGURATION"
    )


def test_update_replaces_navigation():
    menu = [{"name": "Work", "href": "#work", "visible": True}]

    assert update_configuration({"navigation": menu})["navigation"] == menu


@pytest.mark.parametrize(
    "values",
    [{"colors": {}}, {"theme": "dark"}, {"navigation": {"name": "Home"}}],
)
def test_update_rejects_bad_sections(values):
    with pytest.raises(ValidationError):
        update_configuration(values)


def test_reset_restores_defaults():
    update_configuration({"settings": {"maintenance_mode": True}, "navigation": []})

    config = reset_configuration(user_id=1)

    assert config["settings"]["maintenance_mode"] is False
    assert len(config["navigation"]) == len(DEFAULT_CONFIGURATION["navigation"])
    stored = get_configuration()
    assert stored["settings"] == config["settings"]
    assert stored["navigation"] == config["navigation"]
    assert get_audit_entries("configuration", config["id"], 10)[0]["action"] == (
        "RESET_CONFIGURATION"
    )
