from __future__ import annotations

import re
from typing import List

from models.raw_profile import RawProfile
from models.stored_profile import ValidationIssue, ValidationStatus


DEFAULT_MAX_HEADLINE_LENGTH = 220
DEFAULT_MAX_SUMMARY_LENGTH = 2600
DEFAULT_MAX_CONNECTIONS = 30000


def _blank(value) -> bool:
    return value is None or not str(value).strip()


WEB_SCHEMES = ("http", "https", "ws", "wss", "ftp")

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
_AUTHORITY_END_RE = re.compile(r"[/?#\\]")
_FORBIDDEN_HOST_CHARS = frozenset(" \t\n\r#%/:<>?@[\\]^|")


def _valid_port(port: str) -> bool:
    return port == "" or (port.isascii() and port.isdigit() and int(port) <= 65535)


def is_valid_url(url: str) -> bool:
    """Absolute URL as a browser URL parser accepts it.

    Any scheme parses, so `mailto:` addresses pass. Web schemes (http, https,
    ws, wss, ftp) also need a non-empty host free of forbidden characters and
    a numeric port.
    """
    if _blank(url):
        return False
    text = url.strip()
    if not _SCHEME_RE.match(text):
        return False
    scheme, _, rest = text.partition(":")
    if scheme.lower() not in WEB_SCHEMES:
        return True

    authority = _AUTHORITY_END_RE.split(rest.lstrip("/\\"), maxsplit=1)[0]
    host = authority.rpartition("@")[2]
    if host.startswith("["):
        # IPv6 literal, optionally followed by :port
        end = host.find("]")
        if end == -1:
            return False
        tail = host[end + 1:]
        if tail and not tail.startswith(":"):
            return False
        return _valid_port(tail[1:])
    host, _, port = host.partition(":")
    return bool(host) and not any(ch in _FORBIDDEN_HOST_CHARS for ch in host) and _valid_port(port)


class ProfileValidator:
    """Structural and business rules for incoming profiles.

    Issues come back in rule order so two runs over the same record always
    produce the same list.
    """

    def __init__(
        self,
        max_headline_length: int = DEFAULT_MAX_HEADLINE_LENGTH,
        max_summary_length: int = DEFAULT_MAX_SUMMARY_LENGTH,
        max_connections: int = DEFAULT_MAX_CONNECTIONS,
    ) -> None:
        self.max_headline_length = max_headline_length
        self.max_summary_length = max_summary_length
        self.max_connections = max_connections

    def validate(self, profile: RawProfile) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []

        def add(field: str, message: str, severity: str) -> None:
            issues.append(ValidationIssue(field=field, message=message, severity=severity))

        if _blank(profile.linkedin_id):
            add("linkedin_id", "LinkedIn ID is required", "error")

        if _blank(profile.full_name):
            add("full_name", "Full name is required", "error")

        if not is_valid_url(profile.profile_url):
            add("profile_url", "Valid profile URL is required", "error")

        if profile.headline and len(profile.headline) > self.max_headline_length:
            add(
                "headline",
                f"Headline exceeds maximum length of {self.max_headline_length} characters",
                "warning",
            )

        if profile.summary and len(profile.summary) > self.max_summary_length:
            add(
                "summary",
                f"Summary exceeds maximum length of {self.max_summary_length} characters",
                "warning",
            )

        if profile.connections_count is not None:
            if profile.connections_count < 0:
                add("connections_count", "Connections count cannot be negative", "error")
            elif profile.connections_count > self.max_connections:
                add("connections_count", "Connections count exceeds typical LinkedIn maximum", "warning")

        for index, exp in enumerate(profile.experience):
            if _blank(exp.company):
                add(f"experience[{index}].company", "Company name is required for experience entry", "warning")
            if _blank(exp.title):
                add(f"experience[{index}].title", "Job title is required for experience entry", "warning")

        for index, edu in enumerate(profile.education):
            if _blank(edu.school):
                add(f"education[{index}].school", "School name is required for education entry", "warning")

        return issues

    @staticmethod
    def status(issues: List[ValidationIssue]) -> ValidationStatus:
        return "invalid" if any(i.severity == "error" for i in issues) else "valid"
