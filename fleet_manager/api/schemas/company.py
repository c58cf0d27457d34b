"""Company administration and profile schemas."""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import AnyHttpUrl, BaseModel, EmailStr, Field

from .base import RecordPayload

# company-settings field -> companies column
SETTINGS_COLUMNS: Dict[str, str] = {
    "company_name": "name",
    "company_email": "email",
    "company_phone": "phone",
    "company_address": "address",
    "company_city": "city",
    "company_state": "state",
    "company_zip": "zip",
    "company_country": "country",
    "company_registration_number": "registration_number",
    "company_tax_id": "tax_id",
    "company_website": "website",
}


class CompanySettingsPayload(RecordPayload):
    """Body for PUT /api/company-settings.  Omitted fields are left unchanged."""

    company_name: Optional[str] = Field(default=None, max_length=255)
    company_email: Optional[EmailStr] = None
    company_phone: Optional[str] = Field(default=None, max_length=20)
    company_address: Optional[str] = Field(default=None, max_length=255)
    company_city: Optional[str] = Field(default=None, max_length=100)
    company_state: Optional[str] = Field(default=None, max_length=100)
    company_zip: Optional[str] = Field(default=None, max_length=20)
    company_country: Optional[str] = Field(default=None, max_length=100)
    company_registration_number: Optional[str] = Field(default=None, max_length=255)
    company_tax_id: Optional[str] = Field(default=None, max_length=255)
    company_website: Optional[AnyHttpUrl] = None

    def company_columns(self) -> Dict[str, Any]:
        sent = self.model_dump(mode="json", exclude_unset=True)
        return {SETTINGS_COLUMNS[k]: v for k, v in sent.items()}


def settings_from_company(company: Dict[str, Any]) -> Dict[str, str]:
    """Render a companies row as the settings form expects it."""
    return {field: company.get(col) or "" for field, col in SETTINGS_COLUMNS.items()}


class TeamMemberCreate(BaseModel):
    """Body for POST /api/team-members."""

    email: EmailStr


class ProfilePayload(RecordPayload):
    """Body for PUT /api/profile."""

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
