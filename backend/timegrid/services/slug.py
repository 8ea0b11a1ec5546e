"""Service keys as used in vacancy sheets."""

import re
import unicodedata


def slugify(text: str) -> str:
    """"OnSite 4hs Support" → "onsite-4hs-support"."""
    s = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode()
    s = re.sub(r"[^a-z0-9]+", "-", s.lower()).strip("-")
    return s or "service"
