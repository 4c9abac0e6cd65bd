from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase


class SimulateDivesCommandTests(SimpleTestCase):
    def test_reports_rtp(self):
        out = StringIO()
        call_command("simulate_dives", rounds=20, seed=1, tick=0.2, stdout=out)
        output = out.getvalue()
        self.assertIn("[SIM] 20 rounds, stake 10, auto-eject 2.0x, seed 1", output)
        self.assertIn("measured RTP", output)
        self.assertIn("Completed in", output)

    def test_same_seed_same_result(self):
        runs = []
        for _ in range(2):
            out = StringIO()
            call_command("simulate_dives", rounds=10, seed=7, tick=0.2, stdout=out)
            runs.append([line for line in out.getvalue().splitlines() if "RTP" in line])
        self.assertEqual(runs[0], runs[1])

    def test_bad_arguments(self):
        with self.assertRaises(CommandError):
            call_command("simulate_dives", rounds=0, stdout=StringIO())
        with self.assertRaises(CommandError):
            call_command("simulate_dives", target="1.0", stdout=StringIO())
