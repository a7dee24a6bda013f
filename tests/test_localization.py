from app.linkman.core.acl import AccessControlList
from app.linkman.core.i18n import get_localized_text, normalize_language, parse_accept_language
from app.linkman.repos.entities import Category, Link
from app.linkman.services.languages import get_available_languages


def test_language_tags_are_normalized():
    assert normalize_language("de-DE") == "de"
    assert normalize_language("EN_us") == "en"
    assert normalize_language("") is None
    assert normalize_language(None) is None


def test_localized_text_falls_back_to_default():
    translations = {"de": "Öffentlich"}

    assert get_localized_text("Public", translations, "de") == "Öffentlich"
    assert get_localized_text("Public", translations, "de-DE") == "Öffentlich"
    assert get_localized_text("Public", translations, "fr") == "Public"
    assert get_localized_text("Public", translations, None) == "Public"
    assert get_localized_text("Public", {}, "de") == "Public"


def test_entities_localize_every_translated_field():
    category = Category(name="Tools", translations={"de": "Werkzeuge"}, acl=AccessControlList.readable_by(guest=True))
    link = Link(
        href="https://example.org",
        text="Wiki",
        text_translations={"de": "Wissen"},
        description="Team wiki",
        description_translations={"de": "Team-Wiki"},
    )

    assert category.get_name("de-AT") == "Werkzeuge"
    assert category.get_name("it") == "Tools"
    assert link.get_text("de") == "Wissen"
    assert link.get_description("de") == "Team-Wiki"
    assert link.get_description("en") == "Team wiki"


def test_accept_language_picks_highest_weight():
    assert parse_accept_language("en;q=0.5, de-DE;q=0.9, fr;q=0.1") == "de"
    assert parse_accept_language("fr-CH, fr;q=0.9") == "fr"
    assert parse_accept_language("*") is None
    assert parse_accept_language(None) is None


def test_available_languages_put_requested_first():
    assert get_available_languages("de-DE") == ["de", "en"]
    assert get_available_languages("fr") == ["en", "de"]
    assert get_available_languages(None) == ["en", "de"]
