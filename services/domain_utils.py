from __future__ import annotations

import re
import unicodedata
from typing import Optional
from urllib.parse import unquote, urlparse


_PROFILE_ID_RE = re.compile(r"linkedin\.com/in/([\w-]+)", re.IGNORECASE)


def extract_linkedin_id(url: Optional[str]) -> Optional[str]:
    """Return the /in/{slug} identifier of a LinkedIn profile URL, or None."""
    if not url:
        return None
    m = _PROFILE_ID_RE.search(url)
    return m.group(1) if m else None


def normalize_linkedin_profile_url(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    try:
        u = urlparse(url.strip())
    except ValueError:
        return None
    host = (u.netloc or '').lower().replace('www.', '')
    # Country subdomains (de.linkedin.com, ...) resolve to the same profile
    host = re.sub(r"^[a-z]{2}\.linkedin\.com$", "linkedin.com", host)
    path = (u.path or '').rstrip('/')
    if not host:
        return None
    if 'linkedin.com' not in host or not path.startswith('/in/'):
        return None
    # Keep only /in/{slug} and drop trailing locale/segments (e.g., /de, /en)
    parts = [p for p in path.split('/') if p]
    if len(parts) >= 2 and parts[0] == 'in':
        slug = parts[1]
        # Decode percent-encoding and normalize Unicode; canonicalize to lowercase
        slug = unquote(slug)
        slug = unicodedata.normalize('NFKC', slug).strip().lower()
        # Remove invisible characters occasionally present
        slug = slug.replace('\u200b', '').replace('\u200c', '').replace('\u200d', '')
        return f"https://linkedin.com/in/{slug}"
    return f"https://linkedin.com{path}"
