import logging
from decimal import Decimal, InvalidOperation

from .errors import CrashError, InvalidAutoEjectThreshold, InvalidBetAmount, UnknownCommand
from .events import Category

logger = logging.getLogger(__name__)

HELP_LINES = (
    "bet [amount] - Place a bet.",
    "bet [amount] [eject_depth]m - Bet with auto-eject (e.g., bet 100 250m).",
    "bet [amount] [multiplier]x - Bet with auto-eject by multiplier (e.g., bet 100 2.5x).",
    "eject - Eject during a dive.",
    "balance - Check your current credits.",
    "skip - Skip the wait and start the next dive.",
    "help - Show this list.",
)


def parse_auto_eject(token: str) -> Decimal:
    """'250m' -> 2.50, '2.5x' -> 2.5. Depth must exceed 100m, multiplier 1.0x."""
    token = token.strip().lower()
    try:
        if token.endswith("m"):
            value = Decimal(token[:-1]) / 100
        elif token.endswith("x"):
            value = Decimal(token[:-1])
        else:
            raise InvalidAutoEjectThreshold("Invalid auto-eject depth. Must end with 'm' (e.g., 250m).")
    except InvalidOperation:
        raise InvalidAutoEjectThreshold()
    if not value.is_finite() or value <= 1:
        raise InvalidAutoEjectThreshold()
    return value


class CommandInterpreter:
    """Text commands -> engine calls. Results come back as engine events."""

    def __init__(self, engine):
        self.engine = engine
        self.handlers = {
            "bet": self.handle_bet,
            "eject": self.handle_eject,
            "balance": self.handle_balance,
            "skip": self.handle_skip,
            "help": self.handle_help,
        }

    def handle(self, command: str) -> bool:
        """Run one command line. Returns False when it was rejected."""
        command = (command or "").strip()
        if not command:
            return True

        self.engine.emit(Category.PLAYER, f"> {command}")
        parts = command.lower().split()
        action, args = parts[0], parts[1:]

        try:
            handler = self.handlers.get(action)
            if handler is None:
                raise UnknownCommand(action)
            handler(args)
        except CrashError as e:
            logger.info("Command %r rejected: %s", command, e.code)
            self.engine.emit(Category.ERROR, e.message, code=e.code)
            return False
        return True

    def handle_bet(self, args):
        if not args or len(args) > 2:
            raise InvalidBetAmount()
        try:
            amount = Decimal(args[0])
        except InvalidOperation:
            raise InvalidBetAmount()

        auto_eject = parse_auto_eject(args[1]) if len(args) == 2 else None
        self.engine.place_bet(amount, auto_eject)

    def handle_eject(self, args):
        self.engine.eject()

    def handle_balance(self, args):
        self.engine.emit(
            Category.INFO,
            f"Current Balance: {self.engine.balance:.2f} credits.",
            balance=str(self.engine.balance),
        )

    def handle_skip(self, args):
        self.engine.skip()

    def handle_help(self, args):
        self.engine.emit(Category.INFO, "--- Available Commands ---")
        for line in HELP_LINES:
            self.engine.emit(Category.INFO, line)
