from rest_framework import permissions, views, response

from .commands import HELP_LINES
from .conf import EngineConfig
from .curve import calibrated_growth
from .generators import CrashPointGenerator
from .serializers import RulesSerializer


class RulesView(views.APIView):
    """House rules and timings of the dive table, for clients to render."""

    permission_classes = [permissions.AllowAny]

    def get(self, request):
        config = EngineConfig.from_settings()
        median = CrashPointGenerator(
            house_edge=config.house_edge,
            floor=config.crash_floor,
            cap=config.crash_cap,
            bias=config.sqrt_bias,
        ).median()

        data = {
            "initial_balance": config.initial_balance,
            "house_edge": config.house_edge,
            "crash_floor": config.crash_floor,
            "crash_cap": config.crash_cap,
            "median_crash_point": median,
            "treasure_bonus": config.treasure_bonus,
            "treasure_markers": [{"base": base, "jitter": jitter} for base, jitter in config.treasure_markers],
            "curve_growth": calibrated_growth(median, config.curve_target_seconds),
            "curve_target_seconds": config.curve_target_seconds,
            "tick_interval": config.tick_interval,
            "start_on_bet": config.start_on_bet,
            "launch_delay": config.launch_delay,
            "betting_window": config.betting_window,
            "post_round_delay": config.post_round_delay,
            "history_limit": config.history_limit,
            "commands": list(HELP_LINES),
        }
        return response.Response(RulesSerializer(data).data)
