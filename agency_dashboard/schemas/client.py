from datetime import datetime
from pydantic import EmailStr, Field, field_validator
from agency_dashboard.models.choices import ClientStatus
from agency_dashboard.schemas.base import ApiModel
from agency_dashboard.schemas.user import EmployeeSummary
from agency_dashboard.utils.sanitization import sanitize_string

_TEXT_FIELDS = (
    "name", "business_type", "industry", "phone", "address", "website",
    "gst_number", "pan_number", "state", "city", "pincode", "business_registration",
)


class ClientProfile(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    business_type: str | None = Field(None, max_length=50)
    industry: str | None = Field(None, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=20)
    address: str | None = None
    website: str | None = Field(None, max_length=255)
    gst_number: str | None = Field(None, max_length=20)
    pan_number: str | None = Field(None, max_length=20)
    state: str | None = Field(None, max_length=100)
    city: str | None = Field(None, max_length=100)
    pincode: str | None = Field(None, max_length=10)
    business_registration: str | None = Field(None, max_length=100)

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)

    @field_validator("email", mode="before")
    @classmethod
    def blank_email(cls, v):
        # onboarding forms send "" for untouched fields
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ClientCreate(ClientProfile):
    status: ClientStatus = ClientStatus.APPROVED
    assigned_employee_id: int | None = None


class ClientUpdate(ApiModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    business_type: str | None = Field(None, max_length=50)
    industry: str | None = Field(None, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=20)
    address: str | None = None
    website: str | None = Field(None, max_length=255)
    gst_number: str | None = Field(None, max_length=20)
    pan_number: str | None = Field(None, max_length=20)
    state: str | None = Field(None, max_length=100)
    city: str | None = Field(None, max_length=100)
    pincode: str | None = Field(None, max_length=10)
    business_registration: str | None = Field(None, max_length=100)
    status: ClientStatus | None = None
    assigned_employee_id: int | None = None

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def sanitize(cls, v):
        return sanitize_string(v)


class ClientApproval(ApiModel):
    assigned_employee_id: int | None = None


class Client(ClientProfile):
    id: int
    email: str | None = None
    status: str
    assigned_employee_id: int | None = None
    assigned_employee: EmployeeSummary | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OnboardingReceipt(ApiModel):
    id: int
    name: str
    email: str | None = None


class OnboardingResponse(ApiModel):
    message: str
    client: OnboardingReceipt
