"""Row types for the managed tables and the forms that create them."""
import re
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, List, Optional, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator, model_validator

EMAIL_RE = re.compile(r"[^@]+@[^@]+\.[^@]+")

RowId = Union[int, str]


class LoanStatus(str, Enum):
    PENDING = 'PENDING'
    ACTIVE = 'ACTIVE'
    PAID = 'PAID'
    OVERDUE = 'OVERDUE'
    DEFAULTED = 'DEFAULTED'
    CANCELLED = 'CANCELLED'


class LoanType(str, Enum):
    PERSONAL = 'personal'
    BUSINESS = 'business'
    GROUP = 'group'


class CustomerType(str, Enum):
    INDIVIDUAL = 'individual'
    COMPANY = 'company'


# payment term label -> days until due
PAYMENT_TERMS = {
    'Due on Receipt': 0,
    'Net 7': 7,
    'Net 15': 15,
    'Net 30': 30,
    'Net 60': 60,
    'Net 90': 90,
}


def _check_payment_terms(value):
    if value is not None and value not in PAYMENT_TERMS:
        raise ValueError(f"payment_terms must be one of: {', '.join(PAYMENT_TERMS)}")
    return value


PaymentTerms = Annotated[str, AfterValidator(_check_payment_terms)]


class Record(BaseModel):
    model_config = ConfigDict(extra='ignore', str_strip_whitespace=True)

    def to_json(self):
        return self.model_dump(mode='json')


class Group(Record):
    id: RowId
    user_id: Optional[RowId] = None
    name: str
    members: List[Any] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class LoanTemplateFields(Record):
    """The loan parameters a template snapshots."""

    type: LoanType = LoanType.PERSONAL
    currency: str = Field(default='USD', min_length=1)
    amount: Optional[float] = Field(default=None, ge=0)
    due_date: Optional[date] = None
    note: Optional[str] = Field(default=None, max_length=200)
    payment_terms: Optional[PaymentTerms] = None
    tax_rate: Optional[float] = Field(default=None, ge=0)


class LoanTemplate(LoanTemplateFields):
    id: RowId
    user_id: RowId
    name: str
    created_at: Optional[datetime] = None


class Address(Record):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None


class CustomerFields(Record):
    customer_type: CustomerType
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company_name: Optional[str] = None
    tax_id: Optional[str] = None
    registration_number: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[Address] = None
    credit_limit: float = Field(default=0, ge=0)
    payment_terms: PaymentTerms = 'Net 30'
    currency: str = 'USD'
    notes: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_active: bool = True


class CustomerForm(CustomerFields):
    @field_validator('email')
    @classmethod
    def _email_shape(cls, value):
        if value and not EMAIL_RE.match(value):
            raise ValueError('Invalid email address')
        return value or None

    @model_validator(mode='after')
    def _name_for_type(self):
        if self.customer_type == CustomerType.COMPANY and not self.company_name:
            raise ValueError('company_name is required for company customers')
        if self.customer_type == CustomerType.INDIVIDUAL and not self.first_name:
            raise ValueError('first_name is required for individual customers')
        return self


class Customer(CustomerFields):
    id: RowId
    user_id: RowId
    total_credit_issued: float = 0
    outstanding_balance: float = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def display_name(self):
        if self.customer_type == CustomerType.COMPANY:
            return self.company_name or 'Unnamed Company'
        return f"{self.first_name or ''} {self.last_name or ''}".strip() or 'Unnamed Customer'

    @property
    def credit_utilization(self):
        """Outstanding balance as a percentage of the credit limit."""
        if self.credit_limit == 0:
            return 0
        return self.outstanding_balance / self.credit_limit * 100

    @property
    def available_credit(self):
        return max(0, self.credit_limit - self.outstanding_balance)

    def to_json(self):
        data = super().to_json()
        data['display_name'] = self.display_name
        data['available_credit'] = self.available_credit
        return data


class LoanForm(Record):
    customer_id: RowId
    group_id: Optional[RowId] = None
    type: LoanType = LoanType.PERSONAL
    principal: float = Field(gt=0)
    interest_rate: float = Field(default=0, ge=0)
    currency: str = Field(default='USD', min_length=1)
    due_date: date
    note: Optional[str] = Field(default=None, max_length=200)
    status: LoanStatus = LoanStatus.PENDING
    tax_rate: Optional[float] = Field(default=None, ge=0)

    @model_validator(mode='after')
    def _type_specific_fields(self):
        if self.type == LoanType.GROUP and self.group_id is None:
            raise ValueError('group_id is required for group loans')
        # tax applies to business loans only
        if self.type != LoanType.BUSINESS:
            self.tax_rate = None
        return self


class Loan(Record):
    id: RowId
    user_id: RowId
    customer_id: Optional[RowId] = None
    group_id: Optional[RowId] = None
    type: LoanType
    principal: float
    interest_rate: float = 0
    currency: str = 'USD'
    status: LoanStatus
    due_date: Optional[date] = None
    note: Optional[str] = None
    tax_rate: Optional[float] = None
    created_at: Optional[datetime] = None

    def is_overdue(self, today=None):
        if self.status == LoanStatus.PAID or self.due_date is None:
            return False
        return self.due_date < (today or date.today())
