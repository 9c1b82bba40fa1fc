import unittest
from tsql_pg_migrator.command_line import CommandLine

class TestCommandLine(unittest.TestCase):
    def test_config_mode(self):
        args = CommandLine().parse_arguments(['--config', 'config.yaml', '--dry-run', '--log-level', 'DEBUG'])
        self.assertEqual(args.config, 'config.yaml')
        self.assertTrue(args.dry_run)
        self.assertEqual(args.log_level, 'DEBUG')
        self.assertIsNone(args.input)
        self.assertEqual(args.log_file, './migrator.log')

    def test_file_mode(self):
        cmd = CommandLine()
        args = cmd.parse_arguments(['--input', 'a.sql', 'b.sql', '--output-dir', 'out'])
        self.assertEqual(args.input, ['a.sql', 'b.sql'])
        self.assertEqual(cmd.get_parameter_value('output-dir'), 'out')

    def test_config_or_input_required(self):
        with self.assertRaises(SystemExit):
            CommandLine().parse_arguments([])

    def test_version_only(self):
        self.assertTrue(CommandLine().parse_arguments(['--version']).version)

    def test_invalid_log_level(self):
        with self.assertRaises(SystemExit):
            CommandLine().parse_arguments(['--config', 'config.yaml', '--log-level', 'TRACE'])

if __name__ == '__main__':
    unittest.main()
