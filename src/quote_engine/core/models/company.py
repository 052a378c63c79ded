from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Company:
    """Branding block printed in the quote header."""

    name: str
    logo: str | None = None  # asset reference (file name or content digest)
    phone: str | None = None
    email: str | None = None
    website: str | None = None

    def contact_lines(self) -> list[str]:
        lines = [f"Tel: {self.phone}" if self.phone else "", self.email or "", self.website or ""]
        return [line for line in lines if line]


@dataclass(frozen=True)
class Template:
    """Quote template; only the terms text is used by the renderer."""

    name: str = ""
    terms_and_conditions: str | None = None

    @property
    def has_terms(self) -> bool:
        return bool((self.terms_and_conditions or "").strip())
