import re

from .entities import normalize_email

# Упоминание: "@" и сразу за ним токен вида <не-пробел>@<не-пробел>.<не-пробел>.
# Сам ведущий "@" в email не входит: "@s1@student.com" -> "s1@student.com".
# Это внешний контракт с клиентами, менять нельзя.
MENTION_PATTERN = re.compile(r"(?<=@)(\S+@\S+\.\S+)", re.IGNORECASE)


def extract_mentions(text: str) -> list[str]:
    """Возвращает упомянутые email в нижнем регистре, без повторов, в порядке появления."""
    seen = []
    for candidate in MENTION_PATTERN.findall(text):
        email = normalize_email(candidate)
        if email not in seen:
            seen.append(email)
    return seen
