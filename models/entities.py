"""
Data models for the hostel portal
"""
from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from typing import Optional, List

from config import settings
from utils.helpers import parse_date, parse_timestamp


@dataclass
class Room:
    """A lettable unit inside a hostel"""
    id: str
    room_number: str
    capacity: int
    type: str = settings.ROOM_NON_AC

    def to_record(self) -> dict:
        return asdict(self)

    @classmethod
    def from_record(cls, record: dict) -> "Room":
        return cls(
            id=record["id"],
            room_number=str(record["room_number"]),
            capacity=int(record["capacity"]),
            type=record.get("type", settings.ROOM_NON_AC),
        )


@dataclass
class Hostel:
    """A building (block) grouping rooms"""
    id: str
    name: str
    rooms: List[Room] = field(default_factory=list)
    total_capacity: int = 0

    def get_room(self, room_number: str) -> Optional[Room]:
        """Find a room by its number"""
        room_number = str(room_number).strip()
        return next((r for r in self.rooms if r.room_number == room_number), None)

    def to_record(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'rooms': [r.to_record() for r in self.rooms],
            'total_capacity': self.total_capacity,
        }

    @classmethod
    def from_record(cls, record: dict) -> "Hostel":
        rooms = [Room.from_record(r) for r in record.get("rooms", [])]
        # Stored total is ignored so it cannot drift from the rooms
        return cls(
            id=record["id"],
            name=record["name"],
            rooms=rooms,
            total_capacity=sum(r.capacity for r in rooms),
        )


@dataclass(frozen=True)
class PaymentEntry:
    """A single recorded payment"""
    id: str
    date: datetime
    amount: float

    def to_record(self) -> dict:
        return {'id': self.id, 'date': self.date.isoformat(), 'amount': self.amount}

    @classmethod
    def from_record(cls, record: dict) -> "PaymentEntry":
        return cls(
            id=record["id"],
            date=parse_timestamp(record["date"]),
            amount=float(record["amount"]),
        )


@dataclass
class Resident:
    """A tenant assigned to one room of one hostel (by value)"""
    id: str
    first_name: str
    last_name: str
    contact_number: str
    rent: float
    hostel_name: str
    room_number: str
    room_type: str = settings.ROOM_NON_AC
    joining_date: Optional[date] = None
    photo_ref: str = ""
    id_document_ref: str = ""
    username: str = ""
    password: str = ""
    payment_status: str = settings.STATUS_PENDING
    last_payment_date: Optional[datetime] = None
    payment_history: List[PaymentEntry] = field(default_factory=list)
    auto_renew: bool = True
    last_renewed_month: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_paid(self) -> bool:
        return self.payment_status == settings.STATUS_PAID

    def occupies(self, hostel_name: str, room_number: str) -> bool:
        """Check whether this resident is assigned to the given room"""
        return self.hostel_name == hostel_name and self.room_number == room_number

    def to_record(self) -> dict:
        record = asdict(self)
        record['joining_date'] = self.joining_date.isoformat() if self.joining_date else None
        record['last_payment_date'] = (
            self.last_payment_date.isoformat() if self.last_payment_date else None
        )
        record['payment_history'] = [p.to_record() for p in self.payment_history]
        return record

    @classmethod
    def from_record(cls, record: dict) -> "Resident":
        last_payment = record.get("last_payment_date")
        return cls(
            id=record["id"],
            first_name=record["first_name"],
            last_name=record.get("last_name", ""),
            contact_number=str(record.get("contact_number", "")),
            rent=float(record["rent"]),
            hostel_name=record["hostel_name"],
            room_number=str(record["room_number"]),
            room_type=record.get("room_type", settings.ROOM_NON_AC),
            joining_date=parse_date(record.get("joining_date")),
            photo_ref=record.get("photo_ref", ""),
            id_document_ref=record.get("id_document_ref", ""),
            username=record.get("username", ""),
            password=record.get("password", ""),
            payment_status=record.get("payment_status", settings.STATUS_PENDING),
            last_payment_date=parse_timestamp(last_payment) if last_payment else None,
            payment_history=[
                PaymentEntry.from_record(p) for p in record.get("payment_history") or []
            ],
            auto_renew=bool(record.get("auto_renew", True)),
            last_renewed_month=record.get("last_renewed_month"),
        )


@dataclass
class PaymentRequest:
    """A resident's claim of a cash payment, awaiting admin verification"""
    id: str
    resident_id: str
    resident_name: str
    amount: float
    timestamp: datetime
    status: str = settings.REQUEST_PENDING

    @property
    def is_pending(self) -> bool:
        return self.status == settings.REQUEST_PENDING

    def to_record(self) -> dict:
        record = asdict(self)
        record['timestamp'] = self.timestamp.isoformat()
        return record

    @classmethod
    def from_record(cls, record: dict) -> "PaymentRequest":
        return cls(
            id=record["id"],
            resident_id=record["resident_id"],
            resident_name=record.get("resident_name", ""),
            amount=float(record["amount"]),
            timestamp=parse_timestamp(record["timestamp"]),
            status=record.get("status", settings.REQUEST_PENDING),
        )


@dataclass
class Expense:
    """An operating expense of the property"""
    id: str
    date: date
    category: str
    amount: float
    description: str = ""

    def to_record(self) -> dict:
        record = asdict(self)
        record['date'] = self.date.isoformat()
        return record

    @classmethod
    def from_record(cls, record: dict) -> "Expense":
        return cls(
            id=record["id"],
            date=parse_date(record["date"]),
            category=record["category"],
            amount=float(record["amount"]),
            description=record.get("description", ""),
        )


@dataclass
class Announcement:
    """A broadcast notice"""
    id: str
    text: str
    timestamp: datetime
    type: str = "INFO"

    def to_record(self) -> dict:
        record = asdict(self)
        record['timestamp'] = self.timestamp.isoformat()
        return record

    @classmethod
    def from_record(cls, record: dict) -> "Announcement":
        return cls(
            id=record["id"],
            text=record["text"],
            timestamp=parse_timestamp(record["timestamp"]),
            type=record.get("type", "INFO"),
        )


@dataclass
class MenuDay:
    """Meals served on one day of the week"""
    day: str
    breakfast: str = ""
    lunch: str = ""
    dinner: str = ""

    def to_record(self) -> dict:
        return asdict(self)

    @classmethod
    def from_record(cls, record: dict) -> "MenuDay":
        return cls(
            day=record["day"],
            breakfast=record.get("breakfast", ""),
            lunch=record.get("lunch", ""),
            dinner=record.get("dinner", ""),
        )


@dataclass
class ReminderConfig:
    """Rent reminder settings"""
    days_before: int = settings.REMINDER_DAYS_BEFORE
    message_template: str = ""

    def to_record(self) -> dict:
        return asdict(self)

    @classmethod
    def from_record(cls, record: dict) -> "ReminderConfig":
        return cls(
            days_before=int(record.get("days_before", settings.REMINDER_DAYS_BEFORE)),
            message_template=record.get("message_template", ""),
        )
