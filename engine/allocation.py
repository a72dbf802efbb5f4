"""
Allocation engine - hostels, rooms and resident-to-room registration
"""
import logging
import random
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from config import settings
from models.app_state import AppState
from models.entities import Hostel, Room, Resident
from models.errors import ValidationError, NotFoundError, CapacityExceededError
from utils.helpers import generate_id, year_month
from utils.validations import (
    require_text, require_positive_amount, require_positive_int, require_choice,
    require_bool, validate_contact_number, validate_date,
)

logger = logging.getLogger(__name__)

# Profile fields the edit command may change; payment fields are owned by settlement
EDITABLE_FIELDS = {
    'first_name', 'last_name', 'contact_number', 'rent', 'hostel_name',
    'room_number', 'room_type', 'joining_date', 'photo_ref', 'id_document_ref',
    'auto_renew', 'username', 'password',
}


def occupancy_view(residents: List[Resident]) -> Dict[str, Dict[str, List[Resident]]]:
    """
    Group residents by hostel name and room number.

    Every (hostel, room) pair present among the residents appears, including
    pairs whose hostel or room no longer exists.
    """
    view: Dict[str, Dict[str, List[Resident]]] = {}
    for resident in residents:
        view.setdefault(resident.hostel_name, {}).setdefault(resident.room_number, []).append(resident)
    return view


def generate_username(first_name: str, room_number: str, taken: List[str] = None) -> str:
    """
    Lowercased first name followed by the room number ("asha101").
    A name already in use gets a numeric suffix ("asha101_2").
    """
    base = first_name.strip().lower() + str(room_number).strip()
    taken_lower = {t.lower() for t in taken or []}
    if base not in taken_lower:
        return base

    counter = 2
    while f"{base}_{counter}" in taken_lower:
        counter += 1
    return f"{base}_{counter}"


def generate_password(first_name: str, rng: random.Random = None) -> str:
    """First four letters of the first name, one symbol, then the fixed suffix"""
    rng = rng or random
    prefix = "".join(first_name.split())[:settings.PASSWORD_PREFIX_LENGTH]
    return f"{prefix}{rng.choice(settings.PASSWORD_SYMBOLS)}{settings.PASSWORD_SUFFIX}"


class AllocationEngine:
    """
    Validates and applies hostel/room creation and resident registration
    against the application state, keeping every room within capacity.
    """

    def __init__(
        self,
        state: AppState,
        clock: Optional[Callable[[], datetime]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.state = state
        self.clock = clock or datetime.now
        self.rng = rng or random.Random()

    # ------------------------------------------------------------------
    # Hostels and rooms
    # ------------------------------------------------------------------

    def create_hostel(self, name: str) -> Hostel:
        """Create a hostel with no rooms"""
        name = require_text(name, "Hostel name")
        if self.state.find_hostel_by_name(name) is not None:
            raise ValidationError(f"Hostel '{name}' already exists")

        hostel = Hostel(id=generate_id("HST"), name=name)
        self.state.hostels.append(hostel)
        logger.info(f"Hostel {name} created ({hostel.id})")
        return hostel

    def add_room(
        self,
        hostel_id: str,
        room_number: str,
        capacity: int,
        room_type: str = settings.ROOM_NON_AC,
    ) -> Room:
        """Add a room to a hostel and grow the hostel's total capacity"""
        hostel = self.state.get_hostel(hostel_id)
        if hostel is None:
            raise NotFoundError(f"Hostel {hostel_id} not found")

        room_number = require_text(room_number, "Room number")
        capacity = require_positive_int(capacity, "Capacity")
        room_type = require_choice(room_type, settings.ROOM_TYPES, "Room type")
        if hostel.get_room(room_number) is not None:
            raise ValidationError(f"Room {room_number} already exists in {hostel.name}")

        room = Room(id=generate_id("RM"), room_number=room_number, capacity=capacity, type=room_type)
        hostel.rooms.append(room)
        hostel.total_capacity += capacity
        logger.info(f"Room {room_number} (capacity {capacity}) added to {hostel.name}")
        return room

    # ------------------------------------------------------------------
    # Occupancy
    # ------------------------------------------------------------------

    def room_availability(self, hostel: Hostel) -> List[dict]:
        """Occupants and free spaces for every room of a hostel"""
        availability = []
        for room in hostel.rooms:
            occupants = len(self.state.occupants_of(hostel.name, room.room_number))
            availability.append({
                'room_id': room.id,
                'room_number': room.room_number,
                'type': room.type,
                'capacity': room.capacity,
                'occupants': occupants,
                'spaces_left': room.capacity - occupants,
                'is_full': occupants >= room.capacity,
            })
        return availability

    def hostel_occupancy(self, hostel: Hostel) -> int:
        """Number of residents assigned to any room of the hostel"""
        return len([r for r in self.state.residents if r.hostel_name == hostel.name])

    def _resolve_room(self, hostel_name, room_number) -> Tuple[str, str, Room]:
        hostel_name = require_text(hostel_name, "Hostel")
        room_number = require_text(room_number, "Room number")

        hostel = self.state.find_hostel_by_name(hostel_name)
        if hostel is None:
            raise NotFoundError(f"Hostel {hostel_name} not found")
        room = hostel.get_room(room_number)
        if room is None:
            raise NotFoundError(f"Room {room_number} not found in {hostel.name}")
        # Residents always carry the hostel's stored spelling
        return hostel.name, room_number, room

    def _check_capacity(self, hostel_name: str, room: Room, exclude_id: str = None):
        occupants = [
            r for r in self.state.occupants_of(hostel_name, room.room_number)
            if r.id != exclude_id
        ]
        if len(occupants) >= room.capacity:
            raise CapacityExceededError(hostel_name, room.room_number, room.capacity)

    def ensure_vacancy(self, hostel_name: str, room_number: str) -> Room:
        """Resolve the room and raise unless it has a free space"""
        hostel_name, _, room = self._resolve_room(hostel_name, room_number)
        self._check_capacity(hostel_name, room)
        return room

    # ------------------------------------------------------------------
    # Residents
    # ------------------------------------------------------------------

    def validate_profile(self, profile: dict, room: Room) -> dict:
        """Check a registration profile and return its cleaned fields"""
        return {
            'first_name': require_text(profile.get('first_name'), "First name"),
            'last_name': str(profile.get('last_name') or "").strip(),
            'contact_number': validate_contact_number(profile.get('contact_number')),
            'rent': require_positive_amount(profile.get('rent'), "Rent"),
            'room_type': require_choice(
                profile.get('room_type') or room.type, settings.ROOM_TYPES, "Room type"
            ),
            'joining_date': validate_date(profile.get('joining_date'), "Joining date"),
            'auto_renew': require_bool(profile.get('auto_renew', True), "Auto renew"),
        }

    def _check_username_free(self, username: str, exclude_id: str = None):
        taken = any(
            r.username.lower() == username.lower()
            for r in self.state.residents if r.id != exclude_id
        )
        if taken:
            raise ValidationError(f"Username '{username}' is already in use")

    def register_resident(self, profile: dict, hostel_name: str, room_number: str) -> Resident:
        """
        Register a resident into a room.

        Args:
            profile: first_name, last_name, contact_number, rent and optionally
                room_type, joining_date, photo_ref, id_document_ref, auto_renew.
            hostel_name: Name of the target hostel.
            room_number: Number of the target room.

        Returns:
            The new Resident with generated credentials and PENDING status.
        """
        hostel_name, room_number, room = self._resolve_room(hostel_name, room_number)
        self._check_capacity(hostel_name, room)
        fields = self.validate_profile(profile, room)

        now = self.clock()
        username = generate_username(
            fields['first_name'], room_number, [r.username for r in self.state.residents]
        )
        resident = Resident(
            id=generate_id("RES"),
            first_name=fields['first_name'],
            last_name=fields['last_name'],
            contact_number=fields['contact_number'],
            rent=fields['rent'],
            hostel_name=hostel_name,
            room_number=room_number,
            room_type=fields['room_type'],
            joining_date=fields['joining_date'] or now.date(),
            photo_ref=profile.get('photo_ref') or settings.DEFAULT_PHOTO_URL,
            id_document_ref=profile.get('id_document_ref') or "",
            username=username,
            password=generate_password(fields['first_name'], self.rng),
            payment_status=settings.STATUS_PENDING,
            payment_history=[],
            auto_renew=fields['auto_renew'],
            last_renewed_month=year_month(now),
        )

        self.state.residents.insert(0, resident)
        logger.info(f"Resident {resident.full_name} registered into {hostel_name} room {room_number}")
        return resident

    def update_profile(self, resident_id: str, changes: dict) -> Resident:
        """Edit a resident's profile; payment status and history are not editable here"""
        resident = self.state.get_resident(resident_id)
        if resident is None:
            raise NotFoundError(f"Resident {resident_id} not found")

        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        updates = dict(changes)
        if 'first_name' in updates:
            updates['first_name'] = require_text(updates['first_name'], "First name")
        if 'last_name' in updates:
            updates['last_name'] = str(updates['last_name'] or "").strip()
        if 'contact_number' in updates:
            updates['contact_number'] = validate_contact_number(updates['contact_number'])
        if 'rent' in updates:
            updates['rent'] = require_positive_amount(updates['rent'], "Rent")
        if 'room_type' in updates:
            updates['room_type'] = require_choice(updates['room_type'], settings.ROOM_TYPES, "Room type")
        if 'joining_date' in updates:
            updates['joining_date'] = validate_date(updates['joining_date'], "Joining date", required=True)
        if 'auto_renew' in updates:
            updates['auto_renew'] = require_bool(updates['auto_renew'], "Auto renew")
        if 'username' in updates:
            updates['username'] = require_text(updates['username'], "Username")
            self._check_username_free(updates['username'], exclude_id=resident.id)
        if 'password' in updates:
            updates['password'] = require_text(updates['password'], "Password")

        target_hostel = updates.get('hostel_name', resident.hostel_name)
        target_room = updates.get('room_number', resident.room_number)
        if 'hostel_name' in updates or 'room_number' in updates:
            target_hostel, target_room, room = self._resolve_room(target_hostel, target_room)
            if not resident.occupies(target_hostel, target_room):
                self._check_capacity(target_hostel, room, exclude_id=resident.id)
            updates['hostel_name'] = target_hostel
            updates['room_number'] = target_room

        for key, value in updates.items():
            setattr(resident, key, value)

        logger.info(f"Resident {resident.full_name} profile updated: {', '.join(sorted(updates))}")
        return resident

    def authenticate(self, username: str, password: str) -> Optional[Tuple[str, Optional[Resident]]]:
        """
        Resolve login credentials.

        Returns ("ADMIN", None) for the admin, ("RESIDENT", resident) for a
        resident, or None when nothing matches.
        """
        username = str(username or "").strip()
        password = str(password or "").strip()

        if username == settings.ADMIN_USERNAME and password == settings.ADMIN_PASSWORD:
            return ("ADMIN", None)

        resident = next(
            (r for r in self.state.residents
             if r.username.lower() == username.lower() and r.password == password),
            None,
        )
        if resident:
            return ("RESIDENT", resident)
        return None
