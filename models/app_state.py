"""
Application state - the single aggregate holding every collection
"""
import logging
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
import yaml

from models.entities import (
    Hostel, Room, Resident, PaymentRequest, Expense, Announcement,
    MenuDay, ReminderConfig,
)

logger = logging.getLogger(__name__)

TEMPLATES_PATH = Path(__file__).parent.parent / "config" / "templates.yaml"

DEFAULT_TEMPLATES = {
    'welcome_message': (
        "Welcome to {property_name}! Residency Confirmed.\n"
        "Credentials:\nUser: {username}\nKey: {password}\nRoom: {room}\nBlock: {hostel}"
    ),
    'announcement_message': "{property_name} notice ({type}):\n{text}",
    'reminder_template': (
        "Dear {name}, your rent of ₹{amount} for Room {room} is due on {date}. Thanks!"
    ),
    'default_menu': [],
}


def load_templates(path: Path = TEMPLATES_PATH) -> Dict:
    """Load message templates from YAML, filling gaps with built-in defaults"""
    templates = dict(DEFAULT_TEMPLATES)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            templates.update(yaml.safe_load(f) or {})
    except FileNotFoundError:
        logger.warning(f"Templates file not found at {path}; using built-in defaults")
    return templates


class AppState:
    """
    Holds hostels, residents, expenses, payment requests, announcements,
    the weekly menu and the reminder config. It carries no business rules:
    the engines validate and mutate it, the durable store persists it.
    """

    # collection name -> (attribute, entity class)
    COLLECTIONS = {
        'hostels': ('hostels', Hostel),
        'residents': ('residents', Resident),
        'expenses': ('expenses', Expense),
        'payment_requests': ('payment_requests', PaymentRequest),
        'announcements': ('announcements', Announcement),
        'menu': ('menu', MenuDay),
    }

    def __init__(self, templates: Optional[Dict] = None):
        self.templates = templates if templates is not None else load_templates()
        self.hostels: List[Hostel] = []
        self.residents: List[Resident] = []
        self.expenses: List[Expense] = []
        self.payment_requests: List[PaymentRequest] = []
        self.announcements: List[Announcement] = []
        self.menu: List[MenuDay] = self._default_menu()
        self.reminder_config = ReminderConfig(
            message_template=self.templates['reminder_template']
        )

    def _default_menu(self) -> List[MenuDay]:
        return [MenuDay.from_record(day) for day in self.templates.get('default_menu') or []]

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_hostel(self, hostel_id: str) -> Optional[Hostel]:
        return next((h for h in self.hostels if h.id == hostel_id), None)

    def find_hostel_by_name(self, name: str) -> Optional[Hostel]:
        """Hostel names are unique ignoring case"""
        name = str(name).strip().lower()
        return next((h for h in self.hostels if h.name.lower() == name), None)

    def find_room(self, hostel_name: str, room_number: str) -> Optional[Room]:
        hostel = self.find_hostel_by_name(hostel_name)
        return hostel.get_room(room_number) if hostel else None

    def get_resident(self, resident_id: str) -> Optional[Resident]:
        return next((r for r in self.residents if r.id == resident_id), None)

    def get_request(self, request_id: str) -> Optional[PaymentRequest]:
        return next((pr for pr in self.payment_requests if pr.id == request_id), None)

    def occupants_of(self, hostel_name: str, room_number: str) -> List[Resident]:
        """Residents whose hostel name and room number match the room"""
        return [r for r in self.residents if r.occupies(hostel_name, room_number)]

    # ------------------------------------------------------------------
    # Records (durable store boundary)
    # ------------------------------------------------------------------

    def to_records(self, collection: str) -> List[dict]:
        """Serialize a whole collection to plain dicts"""
        if collection == 'reminder_config':
            return [self.reminder_config.to_record()]
        attribute, _ = self._collection(collection)
        return [item.to_record() for item in getattr(self, attribute)]

    def load_records(self, collection: str, records: List[dict]):
        """Replace a whole collection from plain dicts"""
        if collection == 'reminder_config':
            if records:
                self.reminder_config = ReminderConfig.from_record(records[0])
            return
        attribute, entity_cls = self._collection(collection)
        if collection == 'menu' and not records:
            # An empty stored menu keeps the default one
            return
        setattr(self, attribute, [entity_cls.from_record(r) for r in records])

    def _collection(self, collection: str):
        try:
            return self.COLLECTIONS[collection]
        except KeyError:
            raise KeyError(f"Unknown collection: {collection}")

    # ------------------------------------------------------------------
    # DataFrame views
    # ------------------------------------------------------------------

    def get_residents_df(self) -> pd.DataFrame:
        """Get residents as a pandas DataFrame"""
        if not self.residents:
            return pd.DataFrame()

        data = []
        for r in self.residents:
            data.append({
                'resident_id': r.id,
                'name': r.full_name,
                'contact_number': r.contact_number,
                'hostel_name': r.hostel_name,
                'room_number': r.room_number,
                'room_type': r.room_type,
                'rent': r.rent,
                'payment_status': r.payment_status,
                'last_payment_date': r.last_payment_date,
                'joining_date': r.joining_date,
            })

        return pd.DataFrame(data)

    def get_expenses_df(self) -> pd.DataFrame:
        """Get expenses as a pandas DataFrame"""
        if not self.expenses:
            return pd.DataFrame()

        data = []
        for e in self.expenses:
            data.append({
                'expense_id': e.id,
                'date': e.date,
                'category': e.category,
                'amount': e.amount,
                'description': e.description,
            })

        return pd.DataFrame(data)

    def clear(self):
        """Clear all data, restoring the default menu and reminder config"""
        self.hostels.clear()
        self.residents.clear()
        self.expenses.clear()
        self.payment_requests.clear()
        self.announcements.clear()
        self.menu = self._default_menu()
        self.reminder_config = ReminderConfig(
            message_template=self.templates['reminder_template']
        )
