import unicodedata


def _clean(raw: str) -> str:
    s = unicodedata.normalize("NFKC", str(raw or ""))
    return s.replace("\u00A0", " ").strip()           # remove NBSP, trim


def normalize_ticker(raw: str) -> str:
    s = _clean(raw)
    s = "".join(ch for ch in s if not ch.isspace())  # remove ALL spaces
    return s.upper()


def normalize_company(raw: str) -> str:
    """Collapse whitespace in a company name; case is kept."""
    return " ".join(_clean(raw).split())


def validate_company(raw: str) -> str:
    name = normalize_company(raw)
    if not name or len(name) > 120:
        raise ValueError("Invalid company name.")
    return name
