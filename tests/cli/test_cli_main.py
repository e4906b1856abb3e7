import unittest
from contextlib import redirect_stdout
from io import StringIO

from structlog.testing import capture_logs

from nanowallet.cli import main


class CliMainTest(unittest.TestCase):
    def test_init(self):
        # basically making sure importing works
        cli = main.CliManager()
        self.assertIn('run_scenario', cli.command_list)
        self.assertIn('gen_address', cli.command_list)

        f = StringIO()
        with capture_logs():
            with redirect_stdout(f):
                cli.help()
        output = f.getvalue()

        self.assertIn('[wallet]', output)
        self.assertIn('run_scenario', output)
        self.assertIn('Generate new random addresses', output)


if __name__ == '__main__':
    unittest.main()
