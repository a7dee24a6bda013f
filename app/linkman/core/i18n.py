from __future__ import annotations

from typing import Mapping


def normalize_language(language: str | None) -> str | None:
    """Reduce a language tag such as ``de-DE`` or ``en_US`` to its lowercase two-letter code."""
    if not language:
        return None
    primary = language.strip().replace("_", "-").split("-", 1)[0].lower()
    return primary or None


def parse_accept_language(header: str | None) -> str | None:
    """Return the highest weighted language code of an ``Accept-Language`` header."""
    if not header:
        return None
    best: tuple[float, int, str] | None = None
    for position, part in enumerate(header.split(",")):
        pieces = part.strip().split(";")
        tag = pieces[0].strip()
        if not tag or tag == "*":
            continue
        weight = 1.0
        for param in pieces[1:]:
            name, _, value = param.strip().partition("=")
            if name == "q":
                try:
                    weight = float(value)
                except ValueError:
                    weight = 0.0
        candidate = (-weight, position, tag)
        if best is None or candidate < best:
            best = candidate
    return normalize_language(best[2]) if best else None


def normalize_translations(translations: Mapping[str, str] | None) -> dict[str, str]:
    normalized: dict[str, str] = {}
    for language, value in (translations or {}).items():
        code = normalize_language(language)
        if code and value is not None:
            normalized[code] = value
    return normalized


def get_localized_text(default: str | None, translations: Mapping[str, str] | None, language: str | None) -> str | None:
    code = normalize_language(language)
    if code is None or not translations:
        return default
    return translations.get(code, default)


def sort_key(order: int, text: str | None) -> tuple[int, str]:
    return order, (text or "").casefold()
