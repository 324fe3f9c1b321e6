import re
import unicodedata


def slugify(value: str) -> str:
    """Lowercase ASCII slug with diacritics stripped ("Ženský hlas" -> "zensky-hlas")."""
    normalized = unicodedata.normalize("NFD", value or "")
    ascii_only = "".join(ch for ch in normalized if not unicodedata.combining(ch))
    return re.sub(r"[^a-z0-9]+", "-", ascii_only.lower()).strip("-")
