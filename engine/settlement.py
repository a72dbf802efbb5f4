"""
Payment settlement engine - resident payment status and cash-request workflow
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional
from urllib.parse import quote

from config import settings
from models.app_state import AppState
from models.entities import PaymentEntry, PaymentRequest, Resident
from models.errors import NotFoundError
from utils.helpers import format_amount, format_currency, generate_id
from utils.validations import require_positive_amount

logger = logging.getLogger(__name__)


def upi_payment_uri(resident: Resident) -> str:
    """UPI deep link for paying the resident's rent to the admin account"""
    return (
        f"upi://pay?pa={settings.ADMIN_UPI_ID}"
        f"&pn={quote(settings.PROPERTY_NAME)}"
        f"&am={format_amount(resident.rent)}"
        f"&cu={settings.CURRENCY_CODE}"
    )


def build_receipt(resident: Resident, entry: PaymentEntry) -> dict:
    """Receipt data for one payment, ready for a document renderer"""
    return {
        'receipt_number': entry.id[-6:],
        'property_name': settings.PROPERTY_NAME,
        'resident_id': resident.id,
        'resident_name': resident.full_name,
        'contact_number': resident.contact_number,
        'hostel_name': resident.hostel_name,
        'room_number': resident.room_number,
        'room_type': resident.room_type,
        'amount': entry.amount,
        'amount_display': format_currency(entry.amount),
        'currency': settings.CURRENCY_CODE,
        'paid_on': entry.date,
    }


class SettlementEngine:
    """
    Moves residents from PENDING/UNPAID to PAID, either directly (simulated
    online payment) or by approving a resident's cash payment request.
    Each settlement prepends exactly one PaymentEntry to the history.
    """

    def __init__(self, state: AppState, clock: Optional[Callable[[], datetime]] = None):
        self.state = state
        self.clock = clock or datetime.now

    def _require_resident(self, resident_id: str) -> Resident:
        resident = self.state.get_resident(resident_id)
        if resident is None:
            raise NotFoundError(f"Resident {resident_id} not found")
        return resident

    def _mark_paid(self, resident: Resident, amount: float) -> PaymentEntry:
        now = self.clock()
        entry = PaymentEntry(id=generate_id("PAY"), date=now, amount=amount)
        resident.payment_history.insert(0, entry)
        resident.payment_status = settings.STATUS_PAID
        resident.last_payment_date = now
        return entry

    def settle_direct(self, resident_id: str, amount: Optional[float] = None) -> PaymentEntry:
        """Record an immediate payment (UPI, QR or manual) and mark the resident PAID"""
        resident = self._require_resident(resident_id)
        amount = require_positive_amount(resident.rent if amount is None else amount, "Amount")

        if resident.is_paid:
            logger.warning(f"Resident {resident.full_name} is already PAID; recording another payment")

        entry = self._mark_paid(resident, amount)
        logger.info(f"Payment of {amount} settled for {resident.full_name}")
        return entry

    # ------------------------------------------------------------------
    # Cash requests
    # ------------------------------------------------------------------

    def pending_requests(self) -> List[PaymentRequest]:
        """Active requests awaiting verification, oldest first"""
        return [pr for pr in self.state.payment_requests if pr.is_pending]

    def pending_request_for(self, resident_id: str) -> Optional[PaymentRequest]:
        return next(
            (pr for pr in self.state.payment_requests
             if pr.resident_id == resident_id and pr.is_pending),
            None,
        )

    def request_cash_verification(self, resident_id: str, amount: Optional[float] = None) -> PaymentRequest:
        """
        Ask the admin to verify a cash payment. The resident's status does not
        change until the request is approved. A resident has at most one
        pending request; asking again returns the existing one.
        """
        resident = self._require_resident(resident_id)

        existing = self.pending_request_for(resident_id)
        if existing is not None:
            logger.warning(f"Cash request {existing.id} already pending for {resident.full_name}")
            return existing

        amount = require_positive_amount(resident.rent if amount is None else amount, "Amount")
        request = PaymentRequest(
            id=generate_id("REQ"),
            resident_id=resident.id,
            resident_name=resident.full_name,
            amount=amount,
            timestamp=self.clock(),
        )
        self.state.payment_requests.append(request)
        logger.info(f"Cash request {request.id} of {amount} created for {resident.full_name}")
        return request

    def _take_request(self, request_id: str) -> Optional[PaymentRequest]:
        """Remove and return the request, or None if it was already resolved"""
        request = self.state.get_request(request_id)
        if request is None:
            return None
        self.state.payment_requests.remove(request)
        return request

    def approve_cash_request(self, request_id: str) -> Optional[PaymentEntry]:
        """
        Consume the request and settle its amount for the resident.

        Returns the new PaymentEntry, or None when the request no longer
        exists or its resident is gone.
        """
        request = self._take_request(request_id)
        if request is None:
            logger.warning(f"Cash request {request_id} already resolved; approve ignored")
            return None

        request.status = settings.REQUEST_APPROVED
        resident = self.state.get_resident(request.resident_id)
        if resident is None:
            logger.warning(
                f"Cash request {request_id} approved but resident {request.resident_id} "
                f"({request.resident_name}) no longer exists"
            )
            return None

        entry = self._mark_paid(resident, request.amount)
        logger.info(f"Cash request {request_id} approved: {request.amount} for {resident.full_name}")
        return entry

    def reject_cash_request(self, request_id: str) -> bool:
        """Drop the request without touching the resident; False if it was already gone"""
        request = self._take_request(request_id)
        if request is None:
            logger.warning(f"Cash request {request_id} already resolved; reject ignored")
            return False

        request.status = settings.REQUEST_REJECTED
        logger.info(f"Cash request {request_id} from {request.resident_name} rejected")
        return True
