"""
Parsed records returned by the external lookup services.

Instances are frozen so a value handed out by a lookup cache can be shared
between concurrent commands without copying.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class CommandCategory(Enum):
    """Grouping used by /help."""

    ENCODING = "🔤 Encoding & Text"
    CRYPTO = "🔐 Cryptography"
    LOOKUP = "🔎 Lookups"
    MISC = "ℹ️ Miscellaneous"

    def __str__(self) -> str:
        return self.value


# -------------------- NVD --------------------

@dataclass(frozen=True, slots=True)
class CvssScore:
    base_score: float
    version: str
    severity: str


@dataclass(frozen=True, slots=True)
class CveReference:
    url: str
    tags: Tuple[str, ...] = ()

    @property
    def is_advisory(self) -> bool:
        return any("Vendor" in tag or "Advisory" in tag for tag in self.tags)


@dataclass(frozen=True, slots=True)
class CveRecord:
    """One vulnerability as described by the NVD 2.0 API.

    Attributes:
        cve_id: Canonical identifier, e.g. ``CVE-2019-16863``.
        configurations: CPE criteria strings, nested per configuration and node.
    """

    cve_id: str
    vuln_status: Optional[str] = None
    published: Optional[str] = None
    last_modified: Optional[str] = None
    description: Optional[str] = None
    cvss: Optional[CvssScore] = None
    weaknesses: Tuple[str, ...] = ()
    configurations: Tuple[Tuple[Tuple[str, ...], ...], ...] = ()
    references: Tuple[CveReference, ...] = ()


# -------------------- OpenJDK --------------------

@dataclass(frozen=True, slots=True)
class JepRecord:
    """Metadata scraped from an ``openjdk.org/jeps/<n>`` page."""

    number: int
    title: str
    author: Optional[str] = None
    owner: Optional[str] = None
    jep_type: Optional[str] = None
    scope: Optional[str] = None
    status: Optional[str] = None
    release: Optional[str] = None
    component: Optional[str] = None
    discussion: Optional[str] = None
    reviewed_by: Optional[str] = None
    endorsed_by: Optional[str] = None
    created: Optional[str] = None
    updated: Optional[str] = None
    issue: Optional[str] = None
    summary: Optional[str] = None
    goals: Tuple[str, ...] = ()
    non_goals: Tuple[str, ...] = ()
    motivation: Optional[str] = None
    description: Optional[str] = None

    @property
    def url(self) -> str:
        return f"https://openjdk.org/jeps/{self.number}"


# -------------------- JVM --------------------

@dataclass(frozen=True, slots=True)
class JvmInstruction:
    """One row of the JVM bytecode instruction table."""

    mnemonic: str
    opcode_hex: str = ""
    other_bytes: str = ""
    stack_before: str = "..."
    stack_after: str = "..."
    description: str = ""

    @property
    def opcode(self) -> Optional[int]:
        try:
            return int(self.opcode_hex, 16)
        except ValueError:
            return None

    @property
    def format(self) -> str:
        if self.other_bytes:
            return f"{self.mnemonic} {self.other_bytes.replace(':', '')}"
        return self.mnemonic

    @property
    def anchor_id(self) -> str:
        return "jvm-" + self.mnemonic.replace("_", "-")


# -------------------- GitHub --------------------

@dataclass(frozen=True, slots=True)
class GitHubUser:
    login: str
    avatar_url: str
    public_repos: int = 0
    public_gists: int = 0
    followers: int = 0
    following: int = 0
    created_at: Optional[str] = None
    name: Optional[str] = None
    bio: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    blog: Optional[str] = None


@dataclass(frozen=True, slots=True)
class GitHubRepo:
    full_name: str
    owner: str
    html_url: str
    default_branch: str = "main"
    description: Optional[str] = None
    language: Optional[str] = None
    license_name: Optional[str] = None
    stargazers_count: int = 0
    forks_count: int = 0
    watchers_count: int = 0
    open_issues_count: int = 0
    size: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    topics: Tuple[str, ...] = field(default_factory=tuple)
    is_private: bool = False
    fork: bool = False
    archived: bool = False
    disabled: bool = False

    @property
    def status_flags(self) -> Tuple[str, ...]:
        flags = (
            ("Private", self.is_private),
            ("Fork", self.fork),
            ("Archived", self.archived),
            ("Disabled", self.disabled),
        )
        return tuple(name for name, enabled in flags if enabled)
