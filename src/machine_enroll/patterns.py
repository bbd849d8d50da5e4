"""Name grammars for host and logon text.

Each matcher is a pure predicate: the whole text either matches or it does
not.
"""

import re
from dataclasses import dataclass


_OCTET = r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)"
_LABEL = r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
_HOSTNAME = rf"{_LABEL}(?:\.{_LABEL})*"

# NetBIOS domain: 1-15 chars, none of \ / : * ? " < > | .
_NETBIOS_DOMAIN = r'[^\\/:*?"<>|.]{1,15}'
# Logon name: 1-64 chars without \ or @, not made only of spaces and dots
_LOGON_NAME = r"(?![ .]*(?:@|\Z))[^\\@]{1,64}"

IPV4_REGEX = rf"{_OCTET}(?:\.{_OCTET}){{3}}"
HOSTNAME_REGEX = _HOSTNAME
DOWN_LEVEL_LOGON_REGEX = rf"(?:{_NETBIOS_DOMAIN}\\)?{_LOGON_NAME}"
UPN_REGEX = rf"{_LOGON_NAME}(?:@{_HOSTNAME})?"


@dataclass(frozen=True)
class PatternMatcher:
    name: str
    regex: str

    def __post_init__(self):
        object.__setattr__(self, "_compiled", re.compile(self.regex))

    def matches(self, text: str) -> bool:
        return self._compiled.fullmatch(text) is not None


IPV4 = PatternMatcher("ipv4", IPV4_REGEX)
HOSTNAME = PatternMatcher("hostname", HOSTNAME_REGEX)
DOWN_LEVEL_LOGON = PatternMatcher("down_level_logon", DOWN_LEVEL_LOGON_REGEX)
UPN = PatternMatcher("upn", UPN_REGEX)

HOST_MATCHERS = (HOSTNAME, IPV4)
USER_MATCHERS = (DOWN_LEVEL_LOGON, UPN)


def matches_any(text: str, matchers: tuple[PatternMatcher, ...]) -> bool:
    return any(matcher.matches(text) for matcher in matchers)
