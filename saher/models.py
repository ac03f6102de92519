"""
saher.models
============

Dataclasses and enums for the records tracked by SAHER.

Three payload shapes exist:

- :class:`SimpleRecord`    – one optional expiry date (licenses, certificates,
  agencies, supplier contracts, trademarks, misc topics)
- :class:`DualTrackRecord` – lease contracts with a documented and an
  internal expiry track
- :class:`ProcedureRecord` – reference / contact data without any expiry

plus :class:`ArchivedRecord`, the wrapper a record gets when it is
soft-deleted.  Every class converts to and from the camelCase JSON used by
the snapshot file through ``to_dict()`` / ``from_dict()``.  Keys the class
does not know about are kept in ``extra`` so nothing is lost on a
round-trip.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Type, Union

# Attachments are opaque to the core: ``{"data": <base64>, "name": ..., "type": ...}``
Attachment = Dict[str, Any]


class LifecycleStatus(Enum):
    """Expiry state of a record, ordered by :func:`saher.status.reconcile`."""
    ACTIVE = "Active"
    SOON_TO_EXPIRE = "SoonToExpire"
    EXPIRED = "Expired"

    def __str__(self) -> str:
        return self.name

    @classmethod
    def parse(cls, value: Any) -> Optional["LifecycleStatus"]:
        """Accept a member, its wire value or its name; anything else is None."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if value in (member.value, member.name):
                    return member
        return None


class Category(str, Enum):
    """Category tags; each one owns exactly one live collection."""
    COMMERCIAL_LICENSE = "commercialLicense"
    OPERATIONAL_LICENSE = "operationalLicense"
    CIVIL_DEFENSE_CERT = "civilDefenseCert"
    SPECIAL_AGENCY = "specialAgency"
    LEASE_CONTRACT = "leaseContract"
    GENERAL_CONTRACT = "generalContract"
    PROCEDURE = "procedure"
    OTHER_TOPIC = "otherTopic"
    TRADEMARK_CERT = "trademarkCert"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, tag: Any) -> Optional["Category"]:
        """Return the category for *tag* or None when the tag is unknown."""
        if isinstance(tag, cls):
            return tag
        try:
            return cls(tag)
        except ValueError:
            return None

    @property
    def collection_key(self) -> str:
        return COLLECTION_KEYS[self]

    @property
    def has_status(self) -> bool:
        return self is not Category.PROCEDURE


class RenewalType(Enum):
    AUTOMATIC = "Automatic"
    MANUAL = "Manual"


class ContractType(Enum):
    DOCUMENTED = "Documented"
    INTERNAL = "Internal"
    DOCUMENTED_AND_INTERNAL = "DocumentedAndInternal"


# Snapshot key of the live collection owned by each category.
COLLECTION_KEYS: Dict[Category, str] = {
    Category.COMMERCIAL_LICENSE: "commercialLicenses",
    Category.OPERATIONAL_LICENSE: "operationalLicenses",
    Category.CIVIL_DEFENSE_CERT: "civilDefenseCerts",
    Category.SPECIAL_AGENCY: "specialAgencies",
    Category.LEASE_CONTRACT: "leaseContracts",
    Category.GENERAL_CONTRACT: "generalContracts",
    Category.PROCEDURE: "procedures",
    Category.OTHER_TOPIC: "otherTopicsData",
    Category.TRADEMARK_CERT: "trademarkCerts",
}
ARCHIVE_KEY = "archivedRecords"


def _number(value: Any) -> Union[int, float]:
    """Coerce a stored cost to a number; garbage becomes 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0
    return 0


def _optional_number(value: Any) -> Optional[Union[int, float]]:
    return None if value is None else _number(value)


def _record_id(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class WireRecord:
    """
    Mixin giving a dataclass camelCase (de)serialisation.

    Subclasses list ``(attribute, json_key)`` pairs in ``WIRE``; values that
    are None are left out of the JSON, enum members are written as their
    value.
    """
    WIRE: ClassVar[Tuple[Tuple[str, str], ...]] = ()

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = copy.deepcopy(self.extra)  # type: ignore[attr-defined]
        for attr, key in self.WIRE:
            value = getattr(self, attr)
            if value is None:
                continue
            if isinstance(value, Enum):
                value = value.value
            data[key] = copy.deepcopy(value)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]):
        if not isinstance(data, Mapping):
            raise TypeError(f"{cls.__name__} expects a mapping, got {type(data).__name__}")
        known = {key for _, key in cls.WIRE}
        kwargs = {attr: copy.deepcopy(data[key]) for attr, key in cls.WIRE if key in data}
        kwargs["extra"] = {k: copy.deepcopy(v) for k, v in data.items() if k not in known}
        return cls(**kwargs)

    def dates(self) -> List[str]:
        """Every present expiry date on the record."""
        return []


@dataclass
class SimpleRecord(WireRecord):
    """
    Record with a single optional expiry date.

    Parameters
    ----------
    id : int | None
        Assigned by :class:`saher.store.RecordStore` on creation.
    expiry_date : str | None
        ISO ``YYYY-MM-DD``; None or "" means the record never expires.
    status : LifecycleStatus
        Cached value, recomputed on every load and save.
    """
    id: Optional[int] = None
    name: str = ""
    number: str = ""
    expiry_date: Optional[str] = None
    status: LifecycleStatus = LifecycleStatus.ACTIVE
    cost: Union[int, float] = 0
    registration_date: Optional[str] = None
    renewal_type: Optional[RenewalType] = None
    notes: Optional[str] = None
    attachments: List[Attachment] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    WIRE: ClassVar[Tuple[Tuple[str, str], ...]] = (
        ("id", "id"),
        ("name", "name"),
        ("number", "number"),
        ("registration_date", "registrationDate"),
        ("expiry_date", "expiryDate"),
        ("status", "status"),
        ("renewal_type", "renewalType"),
        ("cost", "cost"),
        ("notes", "notes"),
        ("attachments", "attachments"),
    )

    def __post_init__(self):
        self.id = _record_id(self.id)
        self.status = LifecycleStatus.parse(self.status) or LifecycleStatus.ACTIVE
        self.cost = _number(self.cost)
        if self.renewal_type is not None and not isinstance(self.renewal_type, RenewalType):
            try:
                self.renewal_type = RenewalType(self.renewal_type)
            except ValueError:
                self.extra.setdefault("renewalType", self.renewal_type)
                self.renewal_type = None
        self.attachments = list(self.attachments or [])

    def dates(self) -> List[str]:
        return [self.expiry_date] if self.expiry_date else []


@dataclass
class DualTrackRecord(WireRecord):
    """
    Lease contract with two independent expiry tracks.

    ``documented_status`` / ``internal_status`` are None when the matching
    date is absent; ``status`` is their reconciliation.
    """
    id: Optional[int] = None
    name: str = ""
    number: str = ""
    documented_expiry_date: Optional[str] = None
    internal_expiry_date: Optional[str] = None
    contract_type: Optional[ContractType] = None
    status: LifecycleStatus = LifecycleStatus.ACTIVE
    documented_status: Optional[LifecycleStatus] = None
    internal_status: Optional[LifecycleStatus] = None
    documented_cost: Optional[Union[int, float]] = None
    internal_cost: Optional[Union[int, float]] = None
    notes: Optional[str] = None
    attachments: List[Attachment] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    WIRE: ClassVar[Tuple[Tuple[str, str], ...]] = (
        ("id", "id"),
        ("name", "name"),
        ("number", "number"),
        ("internal_expiry_date", "internalExpiryDate"),
        ("documented_expiry_date", "documentedExpiryDate"),
        ("contract_type", "contractType"),
        ("status", "status"),
        ("documented_status", "documentedStatus"),
        ("internal_status", "internalStatus"),
        ("documented_cost", "documentedCost"),
        ("internal_cost", "internalCost"),
        ("notes", "notes"),
        ("attachments", "attachments"),
    )

    def __post_init__(self):
        self.id = _record_id(self.id)
        self.status = LifecycleStatus.parse(self.status) or LifecycleStatus.ACTIVE
        self.documented_status = LifecycleStatus.parse(self.documented_status)
        self.internal_status = LifecycleStatus.parse(self.internal_status)
        self.documented_cost = _optional_number(self.documented_cost)
        self.internal_cost = _optional_number(self.internal_cost)
        if self.contract_type is not None and not isinstance(self.contract_type, ContractType):
            try:
                self.contract_type = ContractType(self.contract_type)
            except ValueError:
                self.extra.setdefault("contractType", self.contract_type)
                self.contract_type = None
        self.attachments = list(self.attachments or [])

    @property
    def total_cost(self) -> Union[int, float]:
        return (self.documented_cost or 0) + (self.internal_cost or 0)

    def dates(self) -> List[str]:
        return [d for d in (self.documented_expiry_date, self.internal_expiry_date) if d]


@dataclass
class ProcedureRecord(WireRecord):
    """Authority / contact metadata.  Carries no expiry or status."""
    id: Optional[int] = None
    license_name: str = ""
    authority: str = ""
    contact_numbers: str = ""
    email: str = ""
    website_name: str = ""
    website_url: str = ""
    username: str = ""
    password: str = ""
    employee_name: Optional[str] = None
    employee_number: Optional[str] = None
    requirements: Optional[str] = None
    notes: Optional[str] = None
    attachments: List[Attachment] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    WIRE: ClassVar[Tuple[Tuple[str, str], ...]] = (
        ("id", "id"),
        ("license_name", "licenseName"),
        ("authority", "authority"),
        ("contact_numbers", "contactNumbers"),
        ("email", "email"),
        ("website_name", "websiteName"),
        ("website_url", "websiteUrl"),
        ("username", "username"),
        ("password", "password"),
        ("employee_name", "employeeName"),
        ("employee_number", "employeeNumber"),
        ("requirements", "requirements"),
        ("notes", "notes"),
        ("attachments", "attachments"),
    )

    def __post_init__(self):
        self.id = _record_id(self.id)
        self.attachments = list(self.attachments or [])


Record = Union[SimpleRecord, DualTrackRecord, ProcedureRecord]


def record_class(category: Category) -> Type[WireRecord]:
    """Payload class stored in the collection of *category*."""
    if category is Category.LEASE_CONTRACT:
        return DualTrackRecord
    if category is Category.PROCEDURE:
        return ProcedureRecord
    return SimpleRecord


def record_from_dict(category: Category, data: Mapping[str, Any]) -> Record:
    return record_class(category).from_dict(data)


# Top-level fields an archive wrapper exposes for listing / searching.
_ARCHIVE_DISPLAY = ("id", "name", "number", "expiryDate", "status", "cost", "notes")


@dataclass
class ArchivedRecord:
    """
    Soft-deleted record.

    ``original_data`` is an independent deep copy of the record as it was
    when it was archived (a raw dict when ``original_type`` is not a known
    category).  The display fields mirror the original's top-level values
    and may be edited while the record stays archived.
    """
    id: Optional[int]
    original_type: str
    deletion_date: str
    original_data: Any
    name: str = ""
    number: str = ""
    expiry_date: Optional[str] = None
    status: Optional[LifecycleStatus] = None
    cost: Union[int, float] = 0
    notes: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.id = _record_id(self.id)
        self.status = LifecycleStatus.parse(self.status)
        self.cost = _number(self.cost)

    @property
    def category(self) -> Optional[Category]:
        return Category.parse(self.original_type)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def wrap(cls, record: Record, category: Category, deleted_at: str) -> "ArchivedRecord":
        """Archive wrapper around a deep copy of *record*."""
        data = record.to_dict()
        if isinstance(record, ProcedureRecord):
            data.setdefault("name", record.license_name)
        return cls.from_parts(data, category.value, deleted_at, copy.deepcopy(record))

    @classmethod
    def from_parts(cls, data: Mapping[str, Any], original_type: str,
                    deletion_date: str, original_data: Any) -> "ArchivedRecord":
        extra = {k: copy.deepcopy(v) for k, v in data.items()
                 if k not in _ARCHIVE_DISPLAY and k not in ("originalType", "deletionDate", "originalData")}
        return cls(
            id=data.get("id"),
            original_type=original_type,
            deletion_date=deletion_date,
            original_data=original_data,
            name=data.get("name") or data.get("licenseName") or "",
            number=data.get("number") or "",
            expiry_date=data.get("expiryDate"),
            status=data.get("status"),
            cost=data.get("cost") or 0,
            notes=data.get("notes"),
            extra=extra,
        )

    # ------------------------------------------------------------------
    # Wire format
    # ------------------------------------------------------------------
    def original_dict(self) -> Dict[str, Any]:
        if isinstance(self.original_data, WireRecord):
            return self.original_data.to_dict()
        return copy.deepcopy(dict(self.original_data or {}))

    def to_dict(self) -> Dict[str, Any]:
        data = copy.deepcopy(self.extra)
        data.update({
            "id": self.id,
            "name": self.name,
            "number": self.number,
            "cost": self.cost,
        })
        if self.expiry_date is not None:
            data["expiryDate"] = self.expiry_date
        if self.status is not None:
            data["status"] = self.status.value
        if self.notes is not None:
            data["notes"] = self.notes
        data["originalType"] = self.original_type
        data["deletionDate"] = self.deletion_date
        data["originalData"] = self.original_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ArchivedRecord":
        if not isinstance(data, Mapping):
            raise TypeError(f"ArchivedRecord expects a mapping, got {type(data).__name__}")
        original_type = data.get("originalType")
        raw = data.get("originalData")
        if not isinstance(raw, Mapping):
            raw = {k: v for k, v in data.items()
                   if k not in ("originalType", "deletionDate", "originalData")}
        category = Category.parse(original_type)
        original = record_from_dict(category, raw) if category else copy.deepcopy(dict(raw))
        return cls.from_parts(data, original_type, data.get("deletionDate") or "", original)
