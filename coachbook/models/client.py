from enum import Enum

from sqlmodel import Field, SQLModel


class RelationshipStatus(str, Enum):
    SINGLE = "single"
    MARRIED = "married"
    DIVORCED = "divorced"
    WIDOWED = "widowed"
    IN_A_RELATIONSHIP = "in a relationship"


class AgeRange(str, Enum):
    AGE_18_24 = "18-24"
    AGE_25_34 = "25-34"
    AGE_35_44 = "35-44"
    AGE_45_54 = "45-54"
    AGE_55_64 = "55-64"
    AGE_65_PLUS = "65+"


class EmploymentStatus(str, Enum):
    FULL_TIME = "Employed Full-time"
    PART_TIME = "Employed Part-time"
    SELF_EMPLOYED = "Self-employed"
    UNEMPLOYED = "Unemployed"
    RETIRED = "Retired"
    STUDENT = "Student"


class ReasonForVisit(str, Enum):
    BUDGET = "Create/Review Budget"
    DEBT_MANAGEMENT = "Debt Management"
    FINANCIAL_PLANNING = "General Financial Planning"
    EMERGENCY_FUND = "Emergency Fund/Savings"
    INVESTING = "Investing & Wealth Building"
    BUSINESS = "Business/Self-employed"
    OTHER = "Other"


class DebtType(str, Enum):
    CREDIT_CARDS = "Credit Cards"
    STUDENT_LOANS = "Student Loans"
    MORTGAGE = "Mortgage"
    CAR_LOAN = "Car Loan"
    MEDICAL = "Medical"
    PERSONAL_LOAN = "Personal Loan"
    OTHER = "Other"


class ContactMethod(str, Enum):
    EMAIL = "Email"
    PHONE = "Phone"
    TEXT = "Text"


class Attachment(SQLModel):
    url: str
    filename: str | None = None


class ClientProfileCreate(SQLModel):
    """Intake record; links one-way to a Booked record via booked_record_id."""

    first_name: str
    last_name: str
    email: str
    phone: str | None = None

    relationship: RelationshipStatus | None = None
    household_size: int | None = None
    age_range: AgeRange | None = None
    employment_status: EmploymentStatus | None = None

    reason_for_visit: ReasonForVisit | None = None
    primary_financial_concern: str | None = None
    debt_types: list[DebtType] = Field(default_factory=list)

    preferred_contact_method: ContactMethod | None = None
    best_time_to_contact: str | None = None

    consent: bool = False
    booked_record_id: str | None = None
    attachments: list[Attachment] = Field(default_factory=list)


class ClientProfileResult(SQLModel):
    id: str
    success: bool = True
