import re
import unicodedata


def slugify(value: str, keep: str = "") -> str:
    """Lowercase, accent-free, dash separated form of ``value``.

    Characters listed in ``keep`` survive next to ``[a-z0-9]``, which lets
    upload keys keep their extension dot.
    """
    if not value:
        return ''
    s = unicodedata.normalize('NFKD', value.strip().lower())
    s = ''.join(ch for ch in s if unicodedata.category(ch) != 'Mn')
    allowed = 'a-z0-9' + re.escape(keep)
    s = re.sub(f'[^{allowed}]+', '-', s)
    s = re.sub(r'-{2,}', '-', s)
    return s.strip('-')
