"""
Case Data Model

Dataclasses for the foreclosure case aggregate: a Case owns exactly one
Property and one Mortgage, and references its Parties, Deadlines and
Documents. Every model can be built from a camelCase payload (JSON fixtures,
API bodies) or from a snake_case database row.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from dateutil import parser as date_parser


class CaseStatus(Enum):
    """Foreclosure lifecycle, in order."""
    NEW = "New"
    DEMAND_LETTER_SENT = "Demand Letter Sent"
    PETITION_FILED = "Petition Filed"
    ORDER_NISI_GRANTED = "Order Nisi Granted"
    REDEMPTION_PERIOD = "Redemption Period"
    SALE_PROCESS = "Sale Process"
    CLOSED = "Closed"


class PartyType(Enum):
    BORROWER = "Borrower"
    LENDER = "Lender"
    THIRD_PARTY = "ThirdParty"
    LAWYER = "Lawyer"
    CLIENT = "Client"


class DeadlineType(Enum):
    STATUTORY = "Statutory"
    COURT = "Court"
    INTERNAL = "Internal"
    CLIENT = "Client"


class DocumentType(Enum):
    DEMAND_LETTER = "Demand Letter"
    PETITION = "Petition"
    ORDER_NISI = "Order Nisi"
    CONDUCT_OF_SALE = "Conduct of Sale"
    AFFIDAVIT = "Affidavit"
    FINAL_ORDER = "Final Order"
    OTHER = "Other"


class DocumentStatus(Enum):
    """Document status. Moves forward only: Draft -> Finalized -> Filed -> Served."""
    DRAFT = "Draft"
    FINALIZED = "Finalized"
    FILED = "Filed"
    SERVED = "Served"


# =========================================================================
# Helpers
# =========================================================================

def _pick(data: Dict[str, Any], *keys: str, default=None):
    """Return the first present, non-None value among keys."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


def parse_date(value) -> Optional[date]:
    """Parse an ISO date/datetime string (or pass through a date)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date_parser.isoparse(str(value)).date()


def parse_datetime(value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return date_parser.isoparse(str(value))


def _to_float(value) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _enum_value(enum_cls, value, default):
    """Coerce a string into enum_cls, falling back to default for unknown labels."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return default


# =========================================================================
# Models
# =========================================================================

@dataclass
class Party:
    """A person or organisation attached to one or more cases.

    ``type`` stays a plain string: firms use labels such as "Mortgagee" that
    are not members of PartyType.
    """
    id: str
    name: str
    type: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Party":
        contact = data.get("contactInfo") or {}
        party_type = data.get("type")
        if isinstance(party_type, PartyType):
            party_type = party_type.value
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name") or "",
            type=party_type or "",
            email=_pick(contact, "email") or data.get("email"),
            phone=_pick(contact, "phone") or data.get("phone"),
            address=_pick(contact, "address") or data.get("address"),
        )


@dataclass
class Property:
    id: str
    street: str = ""
    city: str = ""
    province: str = ""
    postal_code: str = ""
    pid: Optional[str] = None
    legal_description: Optional[str] = None
    property_type: str = "Residential"
    estimated_value: Optional[float] = None

    @property
    def address_line(self) -> str:
        return f"{self.street}, {self.city}, {self.province} {self.postal_code}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Property":
        address = data.get("address") if isinstance(data.get("address"), dict) else data
        return cls(
            id=str(data.get("id", "")),
            street=address.get("street") or "",
            city=address.get("city") or "",
            province=address.get("province") or "",
            postal_code=_pick(address, "postalCode", "postal_code", default=""),
            pid=data.get("pid"),
            legal_description=_pick(data, "legalDescription", "legal_description"),
            property_type=_pick(data, "propertyType", "property_type", default="Residential"),
            estimated_value=_to_float(_pick(data, "estimatedValue", "estimated_value")),
        )


@dataclass
class Mortgage:
    """Mortgage on the case property. Balances are stored, not derived."""
    id: str
    registration_number: str
    principal: Optional[float] = None
    interest_rate: Optional[float] = None
    start_date: Optional[date] = None
    current_balance: Optional[float] = None
    per_diem_interest: Optional[float] = None
    arrears: Optional[float] = None
    payment_amount: Optional[float] = None
    payment_frequency: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Mortgage":
        return cls(
            id=str(data.get("id", "")),
            registration_number=_pick(data, "registrationNumber", "registration_number", default=""),
            principal=_to_float(data.get("principal")),
            interest_rate=_to_float(_pick(data, "interestRate", "interest_rate")),
            start_date=parse_date(_pick(data, "startDate", "start_date")),
            current_balance=_to_float(_pick(data, "currentBalance", "current_balance")),
            per_diem_interest=_to_float(_pick(data, "perDiemInterest", "per_diem_interest")),
            arrears=_to_float(data.get("arrears")),
            payment_amount=_to_float(_pick(data, "paymentAmount", "payment_amount")),
            payment_frequency=_pick(data, "paymentFrequency", "payment_frequency"),
        )


@dataclass
class Deadline:
    id: str
    case_id: str
    title: str
    date: "Optional[date]" = None
    description: str = ""
    type: DeadlineType = DeadlineType.INTERNAL
    complete: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Deadline":
        return cls(
            id=str(data.get("id", "")),
            case_id=str(_pick(data, "caseId", "case_id", default="")),
            title=data.get("title") or "",
            date=parse_date(data.get("date")),
            description=data.get("description") or "",
            type=_enum_value(DeadlineType, data.get("type"), DeadlineType.INTERNAL),
            complete=bool(data.get("complete", False)),
        )


@dataclass
class Document:
    id: Optional[str]
    case_id: str
    title: str
    type: DocumentType = DocumentType.OTHER
    status: DocumentStatus = DocumentStatus.DRAFT
    content: Optional[str] = None
    url: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Document":
        return cls(
            id=str(data["id"]) if data.get("id") is not None else None,
            case_id=str(_pick(data, "caseId", "case_id", default="")),
            title=data.get("title") or "",
            type=_enum_value(DocumentType, data.get("type"), DocumentType.OTHER),
            status=_enum_value(DocumentStatus, data.get("status"), DocumentStatus.DRAFT),
            content=data.get("content"),
            url=data.get("url"),
            created_at=parse_datetime(_pick(data, "createdAt", "created_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "case_id": self.case_id,
            "title": self.title,
            "type": self.type.value,
            "status": self.status.value,
            "content": self.content,
            "url": self.url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass
class CourtInfo:
    file_number: Optional[str] = None
    registry: Optional[str] = None
    hearing_date: Optional[date] = None
    judge_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CourtInfo":
        return cls(
            file_number=_pick(data, "fileNumber", "court_file_number", "file_number"),
            registry=_pick(data, "registry", "court_registry"),
            hearing_date=parse_date(_pick(data, "hearingDate", "hearing_date")),
            judge_name=_pick(data, "judgeName", "judge_name"),
        )


@dataclass
class Case:
    """Aggregate root: one Property, one Mortgage, ordered Parties/Deadlines/Documents."""
    id: str
    file_number: str
    status: CaseStatus
    property: Optional[Property]
    mortgage: Optional[Mortgage]
    parties: List[Party] = field(default_factory=list)
    deadlines: List[Deadline] = field(default_factory=list)
    documents: List[Document] = field(default_factory=list)
    court: Optional[CourtInfo] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Case":
        """Build a case from a nested camelCase payload."""
        court = data.get("court")
        return cls(
            id=str(data.get("id", "")),
            file_number=_pick(data, "fileNumber", "file_number", default=""),
            status=_enum_value(CaseStatus, data.get("status"), CaseStatus.NEW),
            property=Property.from_dict(data["property"]) if data.get("property") else None,
            mortgage=Mortgage.from_dict(data["mortgage"]) if data.get("mortgage") else None,
            parties=[Party.from_dict(p) for p in data.get("parties") or [] if p],
            deadlines=[Deadline.from_dict(d) for d in data.get("deadlines") or []],
            documents=[Document.from_dict(d) for d in data.get("documents") or []],
            court=CourtInfo.from_dict(court) if court else None,
            notes=data.get("notes"),
            created_at=parse_datetime(_pick(data, "createdAt", "created_at")),
            updated_at=parse_datetime(_pick(data, "updatedAt", "updated_at")),
        )


@dataclass
class Template:
    """A user-editable document template containing {token} placeholders."""
    id: int
    name: str
    description: str = ""
    content: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "content": self.content,
        }
