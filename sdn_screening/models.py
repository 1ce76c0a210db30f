"""Watchlist data models for the SDN screening engine."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# Provider serializes multi-valued fields as delimited strings
LIST_DELIMITER = ";"


class RiskLevel(str, Enum):
    """Risk classification of a screened name."""
    CRITICAL = "CRITICAL"   # matched
    CLEAR = "CLEAR"         # no match
    UNKNOWN = "UNKNOWN"     # lookup failed


class EntitySchema(str, Enum):
    """Record schema values the provider is known to send."""
    PERSON = "Person"
    ORGANIZATION = "Organization"
    COMPANY = "Company"
    LEGAL_ENTITY = "LegalEntity"
    VESSEL = "Vessel"
    AIRPLANE = "Airplane"


def split_field(value: Optional[str]) -> list[str]:
    """Split a delimited provider field into its non-empty parts."""
    if not value:
        return []
    return [part.strip() for part in value.split(LIST_DELIMITER) if part.strip()]


class WatchlistRecord(BaseModel):
    """One sanctioned individual or organization, as returned by the provider.

    Read-only reference data: instances are frozen, and fields the provider
    sends beyond the known set are kept so they round-trip back to callers.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    id: str
    schema_: Optional[str] = Field(default=None, alias="schema")
    name: str
    aliases: Optional[str] = None
    birth_date: Optional[str] = None
    countries: Optional[str] = None
    addresses: Optional[str] = None
    identifiers: Optional[str] = None
    sanctions: Optional[str] = None
    phones: Optional[str] = None
    emails: Optional[str] = None
    dataset: Optional[str] = None

    # Provider timestamps, kept verbatim
    first_seen: Optional[str] = None
    last_seen: Optional[str] = None
    last_change: Optional[str] = None

    @property
    def is_person(self) -> bool:
        return self.schema_ == EntitySchema.PERSON.value

    @property
    def alias_list(self) -> list[str]:
        return split_field(self.aliases)

    @property
    def country_list(self) -> list[str]:
        return split_field(self.countries)

    @property
    def address_list(self) -> list[str]:
        return split_field(self.addresses)

    @property
    def identifier_list(self) -> list[str]:
        return split_field(self.identifiers)

    @property
    def sanction_list(self) -> list[str]:
        return split_field(self.sanctions)

    @property
    def phone_list(self) -> list[str]:
        return split_field(self.phones)

    @property
    def email_list(self) -> list[str]:
        return split_field(self.emails)

    @property
    def all_names(self) -> list[str]:
        """Primary name followed by aliases, without duplicates."""
        names = [self.name]
        for alias in self.alias_list:
            if alias not in names:
                names.append(alias)
        return names

    def to_dict(self) -> dict:
        """Provider-shaped dict (original field names, extras included)."""
        return self.model_dump(by_alias=True)
