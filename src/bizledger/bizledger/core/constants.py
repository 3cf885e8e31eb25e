"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

STATE_DOC_PATH = "appState/mainState-v11"
USERS_COLLECTION = "users"

# Payroll rules
WAGE_DAYS_PER_MONTH = Decimal("30")
DAYS_PER_YEAR = Decimal("365.25")
LABOUR_GRATUITY_PER_YEAR = Decimal("600")
LEAVE_SALARY_PER_YEAR = Decimal("600")
GRATUITY_MIN_YEARS = Decimal("1")
GRATUITY_SHORT_TENURE_YEARS = Decimal("5")
GRATUITY_SHORT_TENURE_DAYS = Decimal("21")
GRATUITY_LONG_TENURE_DAYS = Decimal("30")
OVERTIME_HOURLY_RATE = Decimal("7")
HALF_DAY_WEIGHT = Decimal("0.5")
MONEY_PLACES = Decimal("0.01")

DEFAULT_PRESS_RATE_PER_EXTRA = Decimal("5")
MIN_PASSWORD_LENGTH = 6

UNLOAD_WARNING = "Changes you made may not be saved. Are you sure you want to leave?"
