"""
Notice board - expense ledger, announcements, weekly menu and rent reminders
"""
import logging
from datetime import date, datetime
from typing import Callable, List, Optional, Tuple

from config import settings
from models.app_state import AppState
from models.entities import Announcement, Expense, MenuDay, ReminderConfig, Resident
from models.errors import ValidationError
from utils.helpers import format_amount, generate_id, parse_date
from utils.validations import (
    require_text, require_positive_amount, require_positive_int, require_choice,
)

logger = logging.getLogger(__name__)

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class NoticeBoard:
    """
    Operations on the collections that are independent of rooms and
    payments: the expense ledger, announcements, the menu and reminders.
    """

    def __init__(self, state: AppState, clock: Optional[Callable[[], datetime]] = None):
        self.state = state
        self.clock = clock or datetime.now

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    def record_expense(
        self,
        category: str,
        amount: float,
        description: str = "",
        expense_date: Optional[date] = None,
    ) -> Expense:
        """Add an expense to the front of the ledger"""
        category = require_choice(category, settings.EXPENSE_CATEGORIES, "Category")
        amount = require_positive_amount(amount, "Amount")
        expense_date = parse_date(expense_date) or self.clock().date()

        expense = Expense(
            id=generate_id("EXP"),
            date=expense_date,
            category=category,
            amount=amount,
            description=str(description or "").strip(),
        )
        self.state.expenses.insert(0, expense)
        logger.info(f"Expense {category} of {amount} recorded for {expense_date}")
        return expense

    def delete_expense(self, expense_id: str) -> bool:
        """Remove an expense; False if it does not exist"""
        before = len(self.state.expenses)
        self.state.expenses[:] = [e for e in self.state.expenses if e.id != expense_id]
        removed = len(self.state.expenses) < before
        if removed:
            logger.info(f"Expense {expense_id} deleted")
        return removed

    # ------------------------------------------------------------------
    # Announcements
    # ------------------------------------------------------------------

    def post_announcement(self, text: str, announcement_type: str = "INFO") -> Announcement:
        """Publish an announcement; newest first"""
        text = require_text(text, "Announcement text")
        announcement_type = require_choice(
            announcement_type, settings.ANNOUNCEMENT_TYPES, "Announcement type"
        )

        announcement = Announcement(
            id=generate_id("ANN"),
            text=text,
            timestamp=self.clock(),
            type=announcement_type,
        )
        self.state.announcements.insert(0, announcement)
        logger.info(f"{announcement_type} announcement {announcement.id} posted")
        return announcement

    def latest_announcement(self) -> Optional[Announcement]:
        return self.state.announcements[0] if self.state.announcements else None

    def render_announcement(self, announcement: Announcement) -> str:
        return self.state.templates['announcement_message'].format(
            property_name=settings.PROPERTY_NAME,
            type=announcement.type,
            text=announcement.text,
        )

    # ------------------------------------------------------------------
    # Menu
    # ------------------------------------------------------------------

    def set_menu_day(self, day: str, breakfast: str = "", lunch: str = "", dinner: str = "") -> MenuDay:
        """Replace (or add) the meals for one weekday"""
        day = require_text(day, "Day").capitalize()
        require_choice(day, WEEKDAYS, "Day")

        menu_day = MenuDay(day=day, breakfast=breakfast, lunch=lunch, dinner=dinner)
        for index, existing in enumerate(self.state.menu):
            if existing.day == day:
                self.state.menu[index] = menu_day
                break
        else:
            self.state.menu.append(menu_day)
        return menu_day

    def todays_menu(self, today: Optional[date] = None) -> Optional[MenuDay]:
        """Menu for today's weekday, falling back to the first day listed"""
        if not self.state.menu:
            return None
        today = today or self.clock().date()
        day_name = WEEKDAYS[today.weekday()]
        return next((m for m in self.state.menu if m.day == day_name), self.state.menu[0])

    # ------------------------------------------------------------------
    # Rent reminders
    # ------------------------------------------------------------------

    def update_reminder_config(
        self,
        days_before: Optional[int] = None,
        message_template: Optional[str] = None,
    ) -> ReminderConfig:
        config = self.state.reminder_config
        if days_before is not None:
            config.days_before = require_positive_int(days_before, "Days before")
        if message_template is not None:
            config.message_template = require_text(message_template, "Message template")
        return config

    def build_reminders(
        self,
        residents: List[Resident],
        due_date: date,
    ) -> List[Tuple[Resident, str]]:
        """Reminder message for every resident who is not PAID"""
        template = self.state.reminder_config.message_template
        due_date = parse_date(due_date)
        if due_date is None:
            raise ValidationError("Due date is required")

        reminders = []
        for resident in residents:
            if resident.is_paid:
                continue
            try:
                message = template.format(
                    name=resident.full_name,
                    amount=format_amount(resident.rent),
                    room=resident.room_number,
                    date=due_date.strftime(settings.DISPLAY_DATE_FORMAT),
                )
            except (KeyError, IndexError) as e:
                raise ValidationError(f"Reminder template has an unknown placeholder: {e}")
            reminders.append((resident, message))
        return reminders
