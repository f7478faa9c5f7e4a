from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel


class LanguageSpec(BaseModel):
    key: str
    id: int
    name: str


# Judge0 CE language ids for the contest languages
_LANGUAGES: Dict[str, LanguageSpec] = {
    "python": LanguageSpec(key="python", id=71, name="Python (3.8.1)"),
    "java": LanguageSpec(key="java", id=62, name="Java (OpenJDK 13.0.1)"),
    "c": LanguageSpec(key="c", id=50, name="C (GCC 9.2.0)"),
}


def resolve(language_key: Optional[str]) -> Optional[LanguageSpec]:
    """Look up a user-facing language key; ``None`` when unsupported."""
    if not language_key:
        return None
    return _LANGUAGES.get(language_key.strip().lower())


def supported_keys() -> List[str]:
    return sorted(_LANGUAGES)


def list_languages() -> List[LanguageSpec]:
    return [_LANGUAGES[key] for key in supported_keys()]


__all__ = ["LanguageSpec", "resolve", "supported_keys", "list_languages"]
