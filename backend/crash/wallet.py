from decimal import Decimal

from .errors import InsufficientBalance, InvalidBetAmount

INITIAL_BALANCE = Decimal("1000.00")


class Wallet:
    """The engine-owned balance. Never goes negative."""

    def __init__(self, balance=INITIAL_BALANCE):
        balance = Decimal(str(balance)).quantize(Decimal("0.01"))
        if balance < 0:
            raise ValueError("Initial balance cannot be negative")
        self.balance = balance

    def debit(self, amount: Decimal) -> Decimal:
        if amount <= 0:
            raise InvalidBetAmount()
        if self.balance < amount:
            raise InsufficientBalance()
        self.balance -= amount
        return self.balance

    def credit(self, amount: Decimal) -> Decimal:
        if amount < 0:
            raise ValueError("Invalid credit amount")
        self.balance += Decimal(amount)
        return self.balance
