"""Confirmation phrases by conversation language."""

DEFAULT_LANGUAGE = "en"

CONFIRMATION_PHRASES: dict[str, tuple[str, ...]] = {
    "en": (
        "yes",
        "yeah",
        "yep",
        "sure",
        "ok",
        "okay",
        "confirm",
        "confirmed",
        "go ahead",
        "do it",
        "proceed",
        "correct",
        "right",
        "affirmative",
    ),
    "he": (
        "כן",
        "בסדר",
        "אוקיי",
        "נכון",
        "תאשר",
        "אישור",
        "תמשיך",
        "קדימה",
        "בצע",
        "המשך",
    ),
}


def phrases_for(language: str | None) -> tuple[str, ...]:
    """Phrase set for a language, English when the language is unknown."""
    return CONFIRMATION_PHRASES.get(
        (language or "").lower(), CONFIRMATION_PHRASES[DEFAULT_LANGUAGE]
    )
