class CrashError(Exception):
    """
    Recoverable, user-facing rejection of a command.
    Raised before any state is mutated.
    """

    code = "crash_error"
    default_message = "Request rejected"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self) -> dict:
        return {"code": self.code, "error": self.message}


class InvalidBetAmount(CrashError):
    code = "invalid_bet_amount"
    default_message = "Invalid bet amount. Usage: bet [amount] [eject_depth?]"


class InsufficientBalance(CrashError):
    code = "insufficient_balance"
    default_message = "Insufficient balance."


class BettingClosed(CrashError):
    code = "betting_closed"
    default_message = "Betting is currently closed. Please wait for the next round."


class BetAlreadyPlaced(CrashError):
    code = "bet_already_placed"
    default_message = "You already have a bet on this dive."


class NoActiveBet(CrashError):
    code = "no_active_bet"
    default_message = "You have no active bet."


class AlreadyEjected(CrashError):
    code = "already_ejected"
    default_message = "You have already ejected."


class RoundNotInProgress(CrashError):
    code = "round_not_in_progress"
    default_message = "Cannot eject. No dive is in progress."


class InvalidAutoEjectThreshold(CrashError):
    code = "invalid_auto_eject"
    default_message = "Auto-eject depth must be greater than 100m (1.00x)."


class UnknownCommand(CrashError):
    code = "unknown_command"

    def __init__(self, action: str):
        super().__init__(f'Unknown command: "{action}". Type \'help\' for a list of commands.')
        self.action = action


class EngineStateError(RuntimeError):
    """Internal invariant violation. A defect, never shown as a user error."""
