from decimal import Decimal

from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase, override_settings

from crash.conf import EngineConfig


class EngineConfigTests(SimpleTestCase):
    def test_defaults(self):
        config = EngineConfig()
        self.assertEqual(config.house_edge, Decimal("1.03"))
        self.assertEqual(config.initial_balance, Decimal("1000.00"))
        self.assertEqual(config.tick_interval, 0.05)
        self.assertEqual(config.history_limit, 15)
        self.assertTrue(config.start_on_bet)

    @override_settings(DIVE_ENGINE={
        "initial_balance": "500",
        "start_on_bet": "false",
        "launch_delay": "2",
        "history_limit": "5",
    })
    def test_from_settings_coerces_strings(self):
        config = EngineConfig.from_settings()
        self.assertEqual(config.initial_balance, Decimal("500"))
        self.assertIs(config.start_on_bet, False)
        self.assertEqual(config.launch_delay, 2.0)
        self.assertEqual(config.history_limit, 5)

    @override_settings(DIVE_ENGINE={"launch_delay": "2"})
    def test_overrides_win_over_settings(self):
        config = EngineConfig.from_settings(launch_delay=0)
        self.assertEqual(config.launch_delay, 0.0)

    @override_settings(DIVE_ENGINE={"lanch_delay": "2"})
    def test_unknown_key(self):
        with self.assertRaises(ImproperlyConfigured):
            EngineConfig.from_settings()

    def test_cap_can_be_disabled(self):
        self.assertIsNone(EngineConfig().with_overrides(crash_cap=None).crash_cap)

    def test_frozen(self):
        with self.assertRaises(AttributeError):
            EngineConfig().launch_delay = 1
