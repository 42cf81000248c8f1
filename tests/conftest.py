"""Test configuration utilities and shared fixtures."""

import sys
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402

from i18nkit.engine import TranslationEngine  # noqa: E402

ENGLISH_CATALOG = {
    "greeting": "Hello",
    "welcome": "Welcome, {{name}}!",
    "inbox": "You have %d new messages from %s",
    "discount": "%d%% off",
    "home": {"title": "Home", "subtitle": "Start here"},
    "apples": {"one": "%s apple", "other": "%s apples"},
    "only_en": "English only",
}

GERMAN_CATALOG = {
    "greeting": "Hallo",
    "welcome": "Willkommen, {{name}}!",
    "home": {"title": "Startseite"},
    "apples": {"one": "%s Apfel", "other": "%s Äpfel"},
}

RUSSIAN_CATALOG = {
    "greeting": "Привет",
    "files": {
        "one": "%s файл",
        "few": "%s файла",
        "many": "%s файлов",
        "other": "%s файла",
    },
}


@pytest.fixture()
def engine() -> TranslationEngine:
    """Return an engine with English, German, Dutch and Russian catalogues."""

    base = TranslationEngine.create(
        locales=["en", "de", "nl", "ru"],
        default_locale="en",
        fallbacks={"nl": "de", "de-CH": "de"},
    )
    return (
        base.load_translations("en", ENGLISH_CATALOG)
        .load_translations("de", GERMAN_CATALOG)
        .load_translations("ru", RUSSIAN_CATALOG)
    )
