import re


def clean_md(text: str) -> str:
    """
    Strip markdown artifacts pasted into recipe fields.
    Removes:
    - Leading headers (#, ##)
    - Bold markers (**, __)
    - Leading bullets (-, *)
    """
    if not text:
        return ""

    text = re.sub(r"(\*\*|__)(.*?)\1", r"\2", text)
    text = re.sub(r"^\s*#+\s+", "", text)
    text = re.sub(r"^\s*[-*]\s+", "", text)

    return text.strip()


def clean_list(items: list[str] | None) -> list[str]:
    """Clean each entry and drop the empty ones (blank method steps, notes)."""
    cleaned = [clean_md(i) for i in (items or [])]
    return [i for i in cleaned if i]


def split_tags(raw: str | list[str] | None) -> list[str]:
    """Accept "a, b, c" or a list; trims and drops blanks."""
    if raw is None:
        return []
    parts = raw.split(",") if isinstance(raw, str) else raw
    return [p.strip() for p in parts if p and p.strip()]


def _slug_part(text: str, sep: str) -> str:
    s = re.sub(r"[^a-z0-9]+", sep, (text or "").lower())
    return s.strip(sep)


def recipe_slug(username: str, title: str) -> str:
    """
    URL slug for a recipe: "<username>-<title>".

    "Jane Doe" + "Best Pancakes!" -> "jane_doe-best-pancakes"
    """
    return f"{_slug_part(username, '_')}-{_slug_part(title, '-')}"
