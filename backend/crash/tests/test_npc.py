from decimal import Decimal

from django.test import SimpleTestCase

from crash.npc import NPC_NAMES, NPCSimulator
from crash.rng import PythonRandomSource
from crash.tests.helpers import ScriptedRandom


class NPCSimulatorTests(SimpleTestCase):
    def test_roster_shape(self):
        sim = NPCSimulator()
        rng = PythonRandomSource(seed=4)
        for _ in range(300):
            roster = sim.generate(rng)
            self.assertTrue(2 <= len(roster) <= 4)
            names = [npc.name for npc in roster]
            self.assertEqual(len(set(names)), len(names))
            self.assertTrue(set(names) <= set(NPC_NAMES))
            for npc in roster:
                self.assertTrue(Decimal("25") <= npc.bet_amount < Decimal("225"))
                self.assertFalse(npc.ejected)
                if npc.auto_eject_multiplier is not None:
                    self.assertTrue(Decimal("1.50") <= npc.auto_eject_multiplier <= Decimal("6.50"))

    def test_bets_scale_with_player_bet(self):
        sim = NPCSimulator()
        rng = PythonRandomSource(seed=4)
        for _ in range(100):
            for npc in sim.generate(rng, player_bet=Decimal("100")):
                self.assertTrue(Decimal("50") <= npc.bet_amount < Decimal("450"))

    def test_scripted_sample(self):
        # count 3; bet floor(0.5*200 + 25) = 125; 0.5 < 0.6 so auto-eject at 4.00
        roster = NPCSimulator().generate(ScriptedRandom(0.5))
        self.assertEqual(len(roster), 3)
        for npc in roster:
            self.assertEqual(npc.bet_amount, Decimal("125"))
            self.assertEqual(npc.auto_eject_multiplier, Decimal("4.00"))

    def test_no_auto_eject_above_chance(self):
        roster = NPCSimulator().generate(ScriptedRandom(0.7))
        self.assertTrue(all(npc.auto_eject_multiplier is None for npc in roster))

    def test_bad_bot_range(self):
        with self.assertRaises(ValueError):
            NPCSimulator(min_bots=3, max_bots=2)
        with self.assertRaises(ValueError):
            NPCSimulator(names=("Solo",), min_bots=1, max_bots=2)
