"""
Tests for engine.notice_board: expenses, announcements, menu and reminders.
"""
from datetime import date

import pytest

from config import settings
from engine.notice_board import WEEKDAYS
from models.errors import ValidationError


# ---------------------------------------------------------------------------
# Expenses
# ---------------------------------------------------------------------------

class TestExpenses:
    def test_record_expense(self, notice_board, state, clock):
        expense = notice_board.record_expense("MILK", "450", " Two crates ")
        assert expense.amount == 450.0
        assert expense.description == "Two crates"
        assert expense.date == clock.now.date()
        assert state.expenses == [expense]

    def test_newest_first(self, notice_board, state):
        older = notice_board.record_expense("PETROL", 900, expense_date="2026-03-01")
        newer = notice_board.record_expense("VEGETABLES", 300)
        assert state.expenses == [newer, older]
        assert older.date == date(2026, 3, 1)

    @pytest.mark.parametrize("category, amount", [
        ("FURNITURE", 100), ("MILK", 0), ("MILK", "free"), ("MILK", "nan"), ("MILK", float("inf")),
    ])
    def test_invalid_expense(self, notice_board, state, category, amount):
        with pytest.raises(ValidationError):
            notice_board.record_expense(category, amount)
        assert state.expenses == []

    def test_delete_expense(self, notice_board, state):
        expense = notice_board.record_expense("OTHERS", 75)
        assert notice_board.delete_expense(expense.id) is True
        assert state.expenses == []
        assert notice_board.delete_expense(expense.id) is False


# ---------------------------------------------------------------------------
# Announcements
# ---------------------------------------------------------------------------

class TestAnnouncements:
    def test_post_and_latest(self, notice_board, clock):
        assert notice_board.latest_announcement() is None
        notice_board.post_announcement("Water off Sunday")
        alert = notice_board.post_announcement("Fire drill at 5", "ALERT")

        assert notice_board.latest_announcement() is alert
        assert alert.timestamp == clock.now

    def test_blank_or_unknown_type_raises(self, notice_board, state):
        with pytest.raises(ValidationError):
            notice_board.post_announcement("   ")
        with pytest.raises(ValidationError):
            notice_board.post_announcement("Hello", "URGENT")
        assert state.announcements == []

    def test_render_announcement(self, notice_board):
        announcement = notice_board.post_announcement("Rent due soon", "WARNING")
        message = notice_board.render_announcement(announcement)
        assert settings.PROPERTY_NAME in message
        assert "WARNING" in message
        assert message.endswith("Rent due soon")


# ---------------------------------------------------------------------------
# Menu
# ---------------------------------------------------------------------------

class TestMenu:
    def test_default_menu_covers_the_week(self, state):
        assert [m.day for m in state.menu] == WEEKDAYS

    def test_set_menu_day_replaces(self, notice_board, state):
        menu_day = notice_board.set_menu_day("monday", "Dosa", "Thali", "Khichdi")
        assert menu_day.day == "Monday"
        assert len(state.menu) == 7
        assert state.menu[0].breakfast == "Dosa"

    def test_set_menu_day_appends_when_missing(self, notice_board, state):
        state.menu = []
        notice_board.set_menu_day("Friday", lunch="Biryani")
        assert [m.day for m in state.menu] == ["Friday"]

    def test_unknown_day_raises(self, notice_board):
        with pytest.raises(ValidationError):
            notice_board.set_menu_day("Funday")

    def test_todays_menu(self, notice_board):
        today = date(2026, 3, 18)
        assert notice_board.todays_menu(today).day == WEEKDAYS[today.weekday()]

    def test_todays_menu_falls_back_to_first_day(self, notice_board, state):
        state.menu = []
        notice_board.set_menu_day("Tuesday", "Idli")
        assert notice_board.todays_menu(date(2026, 3, 16)).day == "Tuesday"

    def test_todays_menu_empty(self, notice_board, state):
        state.menu = []
        assert notice_board.todays_menu() is None


# ---------------------------------------------------------------------------
# Reminders
# ---------------------------------------------------------------------------

class TestReminders:
    def test_update_reminder_config(self, notice_board, state):
        config = notice_board.update_reminder_config(days_before="5")
        assert config.days_before == 5
        assert state.reminder_config.message_template  # unchanged default

    def test_update_reminder_config_rejects_bad_values(self, notice_board):
        with pytest.raises(ValidationError):
            notice_board.update_reminder_config(days_before=0)
        with pytest.raises(ValidationError):
            notice_board.update_reminder_config(message_template="  ")

    def test_build_reminders_skips_paid(self, notice_board, settlement, allocation, asha, make_profile):
        bina = allocation.register_resident(make_profile("Bina", rent=6250.5), "Block A", "101")
        settlement.settle_direct(asha.id)

        reminders = notice_board.build_reminders([asha, bina], date(2026, 4, 5))

        assert len(reminders) == 1
        resident, message = reminders[0]
        assert resident is bina
        assert message == "Dear Bina Rao, your rent of ₹6250.50 for Room 101 is due on 05 Apr 2026. Thanks!"

    def test_build_reminders_whole_rupees(self, notice_board, asha):
        (_, message), = notice_board.build_reminders([asha], "2026-04-05")
        assert "₹7500 " in message

    def test_custom_template(self, notice_board, asha):
        notice_board.update_reminder_config(message_template="{name}: pay {amount} by {date}")
        (_, message), = notice_board.build_reminders([asha], date(2026, 4, 1))
        assert message == "Asha Rao: pay 7500 by 01 Apr 2026"

    def test_unknown_placeholder_raises(self, notice_board, asha):
        notice_board.update_reminder_config(message_template="Hi {nickname}")
        with pytest.raises(ValidationError):
            notice_board.build_reminders([asha], date(2026, 4, 1))

    def test_missing_due_date_raises(self, notice_board, asha):
        with pytest.raises(ValidationError):
            notice_board.build_reminders([asha], None)
