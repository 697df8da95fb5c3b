"""
Default and Synthetic Ledger Data

Used when a collection is absent from storage (first run) or unreadable.

The synthetic generator produces a plausible year of household finances:
salary twice a month, occasional freelance income, fixed monthly bills,
subscription charges, groceries, dining, fuel, shopping, healthcare,
entertainment and travel. It is seed-parameterized so tests and demos can
reproduce a ledger exactly.
"""

import random
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

from moneywatch.models.ledger import (
    Account,
    AccountType,
    Budget,
    BudgetPeriod,
    Subscription,
    SubscriptionFrequency,
    SubscriptionStatus,
    Transaction,
    TransactionType,
)
from moneywatch.windows import days_in_month, shift_month


DEFAULT_CATEGORIES = [
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Utilities",
    "Healthcare",
    "Travel",
    "Education",
    "Business",
    "Income",
    "Housing",
    "Health & Fitness",
    "Other",
]

CHECKING_ACCOUNT_ID = "1"
SAVINGS_ACCOUNT_ID = "2"
CREDIT_CARD_ACCOUNT_ID = "3"


def default_accounts(now: Optional[datetime] = None) -> list[Account]:
    now = now or datetime.now()
    return [
        Account(
            id=CHECKING_ACCOUNT_ID,
            name="Chase Checking",
            type=AccountType.CHECKING,
            balance=Decimal("5423.67"),
            institution="Chase",
            last_updated=now,
        ),
        Account(
            id=SAVINGS_ACCOUNT_ID,
            name="Chase Savings",
            type=AccountType.SAVINGS,
            balance=Decimal("15230.45"),
            institution="Chase",
            last_updated=now,
        ),
        Account(
            id=CREDIT_CARD_ACCOUNT_ID,
            name="Credit Card",
            type=AccountType.CREDIT_CARD,
            balance=Decimal("-1234.56"),
            institution="Chase",
            last_updated=now,
        ),
    ]


def default_budgets() -> list[Budget]:
    rows = [
        ("Food & Dining", "800", "#3B82F6"),
        ("Transportation", "400", "#10B981"),
        ("Entertainment", "200", "#F59E0B"),
        ("Shopping", "500", "#EF4444"),
        ("Utilities", "300", "#8B5CF6"),
        ("Healthcare", "400", "#06B6D4"),
        ("Housing", "2500", "#EC4899"),
        ("Health & Fitness", "100", "#6366F1"),
    ]
    return [
        Budget(
            id=str(index),
            category=category,
            limit=Decimal(limit),
            period=BudgetPeriod.MONTHLY,
            color=color,
        )
        for index, (category, limit, color) in enumerate(rows, start=1)
    ]


def default_subscriptions(today: Optional[date] = None) -> list[Subscription]:
    """Default subscriptions, billing dates placed relative to `today`."""
    today = today or date.today()
    rows = [
        ("Netflix", "15.99", SubscriptionFrequency.MONTHLY, 27, SubscriptionStatus.ACTIVE, "Entertainment", "🎬"),
        ("Spotify Premium", "9.99", SubscriptionFrequency.MONTHLY, 20, SubscriptionStatus.ACTIVE, "Entertainment", "🎵"),
        ("Amazon Prime", "139.00", SubscriptionFrequency.YEARLY, 210, SubscriptionStatus.ACTIVE, "Shopping", "📦"),
        ("Adobe Creative Cloud", "52.99", SubscriptionFrequency.MONTHLY, 24, SubscriptionStatus.ACTIVE, "Software", "🎨"),
        ("Gym Membership", "29.99", SubscriptionFrequency.MONTHLY, 5, SubscriptionStatus.ACTIVE, "Health & Fitness", "💪"),
        ("Disney+", "7.99", SubscriptionFrequency.MONTHLY, -7, SubscriptionStatus.CANCELLED, "Entertainment", "🏰"),
    ]
    return [
        Subscription(
            id=str(index),
            name=name,
            amount=Decimal(amount),
            frequency=frequency,
            next_billing=today + timedelta(days=offset),
            status=status,
            category=category,
            icon=icon,
        )
        for index, (name, amount, frequency, offset, status, category, icon) in enumerate(rows, start=1)
    ]


def default_categories() -> list[str]:
    return list(DEFAULT_CATEGORIES)


# =============================================================================
# SYNTHETIC HISTORY
# =============================================================================

_FIXED_BILLS = [
    ("Rent Payment", "2400", None, "Housing"),
    ("Electric Bill", "85", "40", "Utilities"),
    ("Internet Service", "79.99", None, "Utilities"),
    ("Phone Bill", "65", "15", "Utilities"),
    ("Car Insurance", "142", None, "Transportation"),
    ("Health Insurance", "320", None, "Healthcare"),
    ("Gym Membership", "29.99", None, "Health & Fitness"),
]

_SUBSCRIPTION_CHARGES = [
    ("Netflix", "15.99", 8),
    ("Spotify Premium", "9.99", 12),
    ("Adobe Creative Cloud", "52.99", 15),
    ("iCloud Storage", "2.99", 20),
    ("Disney+", "7.99", 25),
]

_MERCHANTS = {
    "grocery": ["Whole Foods", "Trader Joes", "Safeway", "Target Grocery"],
    "coffee": ["Starbucks", "Blue Bottle Coffee", "Local Cafe", "Peets Coffee"],
    "restaurant": ["Italian Restaurant", "Sushi Bar", "Mexican Food", "Pizza Place",
                   "Burger Joint", "Thai Restaurant"],
    "gas": ["Shell Gas Station", "Chevron", "76 Gas", "Costco Gas"],
    "shopping": ["Amazon Purchase", "Target", "Best Buy", "Macys", "REI", "Apple Store"],
    "big_purchase": ["New Laptop", "iPhone", "Winter Coat", "Furniture", "TV", "Kitchen Appliance"],
    "healthcare": ["Doctor Visit", "Dentist", "Pharmacy", "Eye Exam", "Physical Therapy"],
    "entertainment": ["Movie Theater", "Concert Tickets", "Sports Game", "Museum", "Bowling"],
    "travel": ["Flight Booking", "Hotel Stay", "Airbnb", "Rental Car", "Trip Expenses"],
}

CENT = Decimal("0.01")


class _HistoryBuilder:
    """Accumulates generated transactions, dropping any dated after today."""

    def __init__(self, rng: random.Random, today: date):
        self.rng = rng
        self.today = today
        self.transactions: list[Transaction] = []

    def money(self, base: str, spread: Optional[str] = None) -> Decimal:
        value = Decimal(base)
        if spread is not None:
            value += Decimal(str(self.rng.random())) * Decimal(spread)
        return value.quantize(CENT)

    def card_or_checking(self, card_probability: float) -> str:
        return CREDIT_CARD_ACCOUNT_ID if self.rng.random() < card_probability else CHECKING_ACCOUNT_ID

    def pick(self, kind: str) -> str:
        return self.rng.choice(_MERCHANTS[kind])

    def add(
        self,
        tx_id: str,
        day: date,
        amount: Decimal,
        description: str,
        category: str,
        account_id: str = CHECKING_ACCOUNT_ID,
        merchant: Optional[str] = None,
        is_recurring: bool = False,
    ) -> None:
        if day > self.today:
            return
        self.transactions.append(
            Transaction(
                id=tx_id,
                account_id=account_id,
                amount=amount,
                description=description,
                category=category,
                date=day,
                type=TransactionType.INCOME if amount > 0 else TransactionType.EXPENSE,
                merchant=merchant,
                is_recurring=is_recurring,
            )
        )

    def build_month(self, year: int, month: int) -> None:
        rng = self.rng
        last_day = days_in_month(year, month)
        key = f"{year}-{month:02d}"

        def on(day: int) -> date:
            return date(year, month, min(day, last_day))

        def any_day() -> date:
            return on(rng.randint(1, 28))

        # Income: salary on the 7th and 21st, freelance 70% of months
        for day in (7, 21):
            self.add(f"salary-{key}-{day}", on(day), self.money("3200", "300"),
                     "Salary Deposit - Tech Corp", "Income", is_recurring=True)
        if rng.random() > 0.3:
            self.add(f"freelance-{key}", any_day(), self.money("400", "1200"),
                     "Freelance Web Development", "Income")

        # Fixed bills in the first five days
        for index, (description, base, spread, category) in enumerate(_FIXED_BILLS):
            self.add(f"monthly-{key}-{index}", on(rng.randint(1, 5)), -self.money(base, spread),
                     description, category, is_recurring=True)

        # Subscription charges on the card
        for index, (name, amount, day) in enumerate(_SUBSCRIPTION_CHARGES):
            self.add(f"sub-{key}-{index}", on(day), -Decimal(amount), f"{name} Subscription",
                     "Entertainment", CREDIT_CARD_ACCOUNT_ID, merchant=name, is_recurring=True)

        # Weekly groceries, coffee twice a week, restaurants most weeks
        for week in range(4):
            merchant = self.pick("grocery")
            self.add(f"grocery-{key}-{week}", on(week * 7 + rng.randint(1, 3)),
                     -self.money("80", "120"), merchant, "Food & Dining",
                     self.card_or_checking(0.5), merchant=merchant)
            for cup in range(2):
                merchant = self.pick("coffee")
                self.add(f"coffee-{key}-{week}-{cup}", on(week * 7 + rng.randint(1, 7)),
                         -self.money("3", "8"), merchant, "Food & Dining", merchant=merchant)
            if rng.random() > 0.3:
                merchant = self.pick("restaurant")
                self.add(f"restaurant-{key}-{week}", on(week * 7 + rng.randint(1, 7)),
                         -self.money("25", "75"), merchant, "Food & Dining",
                         self.card_or_checking(0.4), merchant=merchant)

        for fill in range(3):
            if rng.random() > 0.2:
                merchant = self.pick("gas")
                self.add(f"gas-{key}-{fill}", any_day(), -self.money("35", "45"), merchant,
                         "Transportation", self.card_or_checking(0.3), merchant=merchant)

        for trip in range(2):
            if rng.random() > 0.4:
                merchant = self.pick("shopping")
                self.add(f"shopping-{key}-{trip}", any_day(), -self.money("20", "200"), merchant,
                         "Shopping", self.card_or_checking(0.5), merchant=merchant)
        if rng.random() > 0.85:
            self.add(f"big-purchase-{key}", any_day(), -self.money("300", "1200"),
                     self.pick("big_purchase"), "Shopping", CREDIT_CARD_ACCOUNT_ID)

        if rng.random() > 0.7:
            self.add(f"healthcare-{key}", any_day(), -self.money("25", "200"),
                     self.pick("healthcare"), "Healthcare", self.card_or_checking(0.5))
        if rng.random() > 0.5:
            self.add(f"entertainment-{key}", any_day(), -self.money("15", "85"),
                     self.pick("entertainment"), "Entertainment", self.card_or_checking(0.6))
        if rng.random() > 0.9:
            self.add(f"travel-{key}", any_day(), -self.money("200", "800"),
                     self.pick("travel"), "Travel", CREDIT_CARD_ACCOUNT_ID)


def generate_transactions(
    today: Optional[date] = None,
    months: int = 12,
    seed: Optional[int] = None,
) -> list[Transaction]:
    """
    Generate a synthetic transaction history.

    Args:
        today: Last day of the history; nothing is dated after it
        months: Number of calendar months, ending with today's month
        seed: Random seed; the same seed and today give the same ledger

    Returns:
        Transactions sorted newest first
    """
    if months < 1:
        raise ValueError(f"months must be at least 1, got {months}")
    today = today or date.today()
    builder = _HistoryBuilder(random.Random(seed), today)

    for offset in range(-(months - 1), 1):
        builder.build_month(*shift_month(today.year, today.month, offset))

    return sorted(builder.transactions, key=lambda t: t.date, reverse=True)
