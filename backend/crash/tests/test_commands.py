from decimal import Decimal

from django.test import SimpleTestCase

from crash.commands import HELP_LINES, CommandInterpreter, parse_auto_eject
from crash.errors import InvalidAutoEjectThreshold
from crash.events import Category
from crash.state import Phase
from crash.tests.helpers import Recorder, make_engine


class ParseAutoEjectTests(SimpleTestCase):
    def test_depth_and_multiplier_forms(self):
        self.assertEqual(parse_auto_eject("250m"), Decimal("2.50"))
        self.assertEqual(parse_auto_eject("2.5x"), Decimal("2.5"))
        self.assertEqual(parse_auto_eject(" 101M "), Decimal("1.01"))

    def test_rejected_tokens(self):
        for token in ("250", "100m", "1x", "0.5x", "abcm", "x", "-300m"):
            with self.subTest(token=token):
                with self.assertRaises(InvalidAutoEjectThreshold):
                    parse_auto_eject(token)


class CommandInterpreterTests(SimpleTestCase):
    def setUp(self):
        self.engine, self.clock = make_engine(crash_points=("9.00",))
        self.recorder = Recorder(self.engine)
        self.engine.start()
        self.interpreter = CommandInterpreter(self.engine)

    def errors(self):
        return [e for e in self.recorder.events if e.category == Category.ERROR]

    def test_bet_with_depth(self):
        self.assertTrue(self.interpreter.handle("bet 100 250m"))
        self.assertEqual(self.engine.bet.amount, Decimal("100.00"))
        self.assertEqual(self.engine.bet.auto_eject_multiplier, Decimal("2.50"))
        self.assertIn("> bet 100 250m", self.recorder.texts(Category.PLAYER))
        self.assertIn(
            "Bet placed: 100.00 credits with auto-eject at 250m.",
            self.recorder.texts(Category.SUCCESS),
        )

    def test_bet_with_multiplier(self):
        self.interpreter.handle("BET 40 3x")
        self.assertEqual(self.engine.bet.auto_eject_multiplier, Decimal("3.00"))

    def test_bad_bets_become_error_events(self):
        cases = [
            ("bet", "invalid_bet_amount"),
            ("bet lots", "invalid_bet_amount"),
            ("bet 10 20 30", "invalid_bet_amount"),
            ("bet 5000", "insufficient_balance"),
            ("bet 1e30", "insufficient_balance"),
            ("bet -1e30", "invalid_bet_amount"),
            ("bet 10 1e40x", "invalid_auto_eject"),
            ("bet 10 100m", "invalid_auto_eject"),
            ("bet 10 250", "invalid_auto_eject"),
        ]
        for line, code in cases:
            with self.subTest(line=line):
                self.assertFalse(self.interpreter.handle(line))
                self.assertEqual(self.errors()[-1].data["code"], code)
        self.assertEqual(self.engine.balance, Decimal("1000.00"))
        self.assertIsNone(self.engine.bet)

    def test_unknown_command(self):
        self.assertFalse(self.interpreter.handle("dance"))
        self.assertEqual(
            self.errors()[-1].text,
            "Unknown command: \"dance\". Type 'help' for a list of commands.",
        )

    def test_empty_line_is_ignored(self):
        before = len(self.recorder.events)
        self.assertTrue(self.interpreter.handle("   "))
        self.assertEqual(len(self.recorder.events), before)

    def test_balance(self):
        self.interpreter.handle("balance")
        self.assertEqual(self.recorder.texts(Category.INFO)[-1], "Current Balance: 1000.00 credits.")

    def test_help(self):
        self.interpreter.handle("help")
        texts = self.recorder.texts(Category.INFO)
        self.assertEqual(texts[-len(HELP_LINES) - 1], "--- Available Commands ---")
        self.assertEqual(texts[-len(HELP_LINES):], list(HELP_LINES))

    def test_eject_flow(self):
        self.assertFalse(self.interpreter.handle("eject"))
        self.assertEqual(self.errors()[-1].data["code"], "round_not_in_progress")

        self.interpreter.handle("bet 100")
        self.clock.advance(0.75)
        self.assertTrue(self.interpreter.handle("eject"))
        self.assertEqual(self.engine.balance, Decimal("1025.00"))

        self.assertFalse(self.interpreter.handle("eject"))
        self.assertEqual(self.errors()[-1].data["code"], "already_ejected")

    def test_skip(self):
        self.interpreter.handle("bet 100")
        self.assertTrue(self.interpreter.handle("skip"))
        self.assertEqual(self.engine.phase, Phase.IN_PROGRESS)
        self.assertEqual(self.engine.balance, Decimal("1000.00"))

        self.assertFalse(self.interpreter.handle("skip"))
        self.assertEqual(self.errors()[-1].data["code"], "betting_closed")
