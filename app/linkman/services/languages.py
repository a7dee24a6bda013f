from __future__ import annotations

from app.linkman.core.config import settings
from app.linkman.core.i18n import normalize_language


def get_available_languages(requested: str | None) -> list[str]:
    """Configured languages with the requested one moved to the front."""
    languages: list[str] = []
    for language in settings.AVAILABLE_LANGUAGES:
        code = normalize_language(language)
        if code and code not in languages:
            languages.append(code)
    code = normalize_language(requested)
    if code in languages:
        languages.remove(code)
        languages.insert(0, code)
    return languages
