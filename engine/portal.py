"""
Hostel portal - command façade over the engines and external collaborators
"""
import logging
import random
import threading
from datetime import date, datetime
from typing import Callable, Iterable, List, Optional, Tuple

from config import settings
from engine.allocation import AllocationEngine, occupancy_view
from engine.notice_board import NoticeBoard
from engine.reporting import ReportingAggregator
from engine.settlement import SettlementEngine, build_receipt
from models.app_state import AppState
from models.entities import (
    Announcement, Expense, Hostel, PaymentEntry, PaymentRequest, Resident, Room,
)
from models.errors import CollaboratorError, NotFoundError

logger = logging.getLogger(__name__)


class HostelPortal:
    """
    Applies admin and resident commands to the application state.

    Each command runs under one lock, validates before mutating, then
    persists the collections it changed and dispatches notifications.
    Persistence and notification are attempted once; a failure is logged
    and kept in collaborator_errors, and never undoes the command.
    """

    def __init__(
        self,
        state: Optional[AppState] = None,
        store=None,
        notifier=None,
        uploader=None,
        clock: Optional[Callable[[], datetime]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.state = state if state is not None else AppState()
        self.store = store
        self.notifier = notifier
        self.uploader = uploader
        self.clock = clock or datetime.now
        self.collaborator_errors: List[CollaboratorError] = []
        self._lock = threading.RLock()

        self.allocation = AllocationEngine(self.state, clock=self.clock, rng=rng)
        self.settlement = SettlementEngine(self.state, clock=self.clock)
        self.notice_board = NoticeBoard(self.state, clock=self.clock)

    @classmethod
    def load(cls, store, **kwargs) -> "HostelPortal":
        """Build a portal whose state is read back from the durable store"""
        state = kwargs.pop('state', None) or AppState()
        for collection in settings.COLLECTIONS:
            state.load_records(collection, store.load(collection))
        logger.info(f"Loaded {len(state.residents)} residents and {len(state.hostels)} hostels from store")
        return cls(state=state, store=store, **kwargs)

    # ------------------------------------------------------------------
    # Collaborator edges
    # ------------------------------------------------------------------

    def _record_failure(self, collaborator: str, operation: str, error: Exception):
        failure = error if isinstance(error, CollaboratorError) else CollaboratorError(collaborator, operation, error)
        logger.error(str(failure))
        self.collaborator_errors.append(failure)

    def _persist(self, *collections: str):
        if self.store is None:
            return
        for collection in collections:
            try:
                self.store.save(collection, self.state.to_records(collection))
            except Exception as e:
                self._record_failure("store", f"save {collection}", e)

    def _notify(self, destination: str, text: str) -> bool:
        if self.notifier is None:
            return False
        try:
            self.notifier.notify(destination, text)
            return True
        except Exception as e:
            self._record_failure("notifier", f"notify {destination}", e)
            return False

    def _upload(self, encoded_image: Optional[str]) -> Optional[str]:
        if not encoded_image or self.uploader is None:
            return encoded_image
        try:
            return self.uploader.upload(encoded_image)
        except Exception as e:
            self._record_failure("uploader", "upload", e)
            return encoded_image

    # ------------------------------------------------------------------
    # Allocation commands
    # ------------------------------------------------------------------

    def create_hostel(self, name: str) -> Hostel:
        with self._lock:
            hostel = self.allocation.create_hostel(name)
            self._persist('hostels')
            return hostel

    def add_room(self, hostel_id: str, room_number: str, capacity: int,
                 room_type: str = settings.ROOM_NON_AC) -> Room:
        with self._lock:
            room = self.allocation.add_room(hostel_id, room_number, capacity, room_type)
            self._persist('hostels')
            return room

    def register_resident(self, profile: dict, hostel_name: str, room_number: str) -> Resident:
        """
        Register a resident, upload their photo and ID document, and send
        the generated credentials to their contact number.

        The profile may carry 'photo' and 'id_document' as encoded images;
        they are uploaded and stored as photo_ref / id_document_ref.
        """
        with self._lock:
            profile = dict(profile)
            photo = profile.pop('photo', None)
            id_document = profile.pop('id_document', None)

            # Room, capacity and profile are all checked before anything is uploaded
            room = self.allocation.ensure_vacancy(hostel_name, room_number)
            self.allocation.validate_profile(profile, room)

            if photo:
                profile['photo_ref'] = self._upload(photo)
            if id_document:
                profile['id_document_ref'] = self._upload(id_document)

            resident = self.allocation.register_resident(profile, hostel_name, room_number)
            self._persist('residents')

            message = self.state.templates['welcome_message'].format(
                property_name=settings.PROPERTY_NAME,
                username=resident.username,
                password=resident.password,
                room=resident.room_number,
                hostel=resident.hostel_name,
            )
            self._notify(resident.contact_number, message)
            return resident

    def update_profile(self, resident_id: str, changes: dict) -> Resident:
        with self._lock:
            resident = self.allocation.update_profile(resident_id, changes)
            self._persist('residents')
            return resident

    def authenticate(self, username: str, password: str) -> Optional[Tuple[str, Optional[Resident]]]:
        return self.allocation.authenticate(username, password)

    def occupancy_view(self):
        return occupancy_view(self.state.residents)

    def room_availability(self, hostel_name: str) -> List[dict]:
        hostel = self.state.find_hostel_by_name(hostel_name)
        if hostel is None:
            raise NotFoundError(f"Hostel {hostel_name} not found")
        return self.allocation.room_availability(hostel)

    # ------------------------------------------------------------------
    # Settlement commands
    # ------------------------------------------------------------------

    def settle_direct(self, resident_id: str, amount: Optional[float] = None) -> PaymentEntry:
        with self._lock:
            entry = self.settlement.settle_direct(resident_id, amount)
            self._persist('residents')
            return entry

    def request_cash_verification(self, resident_id: str, amount: Optional[float] = None) -> PaymentRequest:
        with self._lock:
            request = self.settlement.request_cash_verification(resident_id, amount)
            self._persist('payment_requests')
            return request

    def approve_cash_request(self, request_id: str) -> Optional[PaymentEntry]:
        with self._lock:
            before = len(self.state.payment_requests)
            entry = self.settlement.approve_cash_request(request_id)
            if entry is not None:
                self._persist('residents', 'payment_requests')
            elif len(self.state.payment_requests) < before:
                self._persist('payment_requests')
            return entry

    def reject_cash_request(self, request_id: str) -> bool:
        with self._lock:
            removed = self.settlement.reject_cash_request(request_id)
            if removed:
                self._persist('payment_requests')
            return removed

    def pending_requests(self) -> List[PaymentRequest]:
        return self.settlement.pending_requests()

    def receipt(self, resident_id: str, entry_id: str) -> dict:
        """Receipt data for one of a resident's payments"""
        resident = self.state.get_resident(resident_id)
        if resident is None:
            raise NotFoundError(f"Resident {resident_id} not found")
        entry = next((p for p in resident.payment_history if p.id == entry_id), None)
        if entry is None:
            raise NotFoundError(f"Payment {entry_id} not found for {resident.full_name}")
        return build_receipt(resident, entry)

    # ------------------------------------------------------------------
    # Notice board commands
    # ------------------------------------------------------------------

    def record_expense(self, category: str, amount: float, description: str = "",
                       expense_date: Optional[date] = None) -> Expense:
        with self._lock:
            expense = self.notice_board.record_expense(category, amount, description, expense_date)
            self._persist('expenses')
            return expense

    def delete_expense(self, expense_id: str) -> bool:
        with self._lock:
            removed = self.notice_board.delete_expense(expense_id)
            if removed:
                self._persist('expenses')
            return removed

    def post_announcement(self, text: str, announcement_type: str = "INFO",
                          broadcast: bool = False) -> Announcement:
        """Publish an announcement, optionally messaging every resident"""
        with self._lock:
            announcement = self.notice_board.post_announcement(text, announcement_type)
            self._persist('announcements')
            if broadcast:
                message = self.notice_board.render_announcement(announcement)
                self._send_all((r.contact_number, message) for r in self.state.residents)
            return announcement

    def set_menu_day(self, day: str, breakfast: str = "", lunch: str = "", dinner: str = ""):
        with self._lock:
            menu_day = self.notice_board.set_menu_day(day, breakfast, lunch, dinner)
            self._persist('menu')
            return menu_day

    def update_reminder_config(self, days_before: Optional[int] = None,
                               message_template: Optional[str] = None):
        with self._lock:
            config = self.notice_board.update_reminder_config(days_before, message_template)
            self._persist('reminder_config')
            return config

    def send_rent_reminders(self, due_date: date) -> int:
        """Message every resident who is not PAID; returns how many were sent"""
        with self._lock:
            reminders = self.notice_board.build_reminders(self.state.residents, due_date)
            return self._send_all((r.contact_number, message) for r, message in reminders)

    def _send_all(self, messages: Iterable[Tuple[str, str]]) -> int:
        return sum(1 for destination, text in messages if self._notify(destination, text))

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def reporting(self) -> ReportingAggregator:
        return ReportingAggregator(self.state.residents, self.state.expenses)

    def summary_stats(self) -> dict:
        return self.reporting().summary_stats()

    def monthly_settlement_report(self, month) -> dict:
        return self.reporting().monthly_settlement_report(month)
