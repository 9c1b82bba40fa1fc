import os
import shutil
import tempfile
import unittest
from tsql_pg_migrator import main

class TestMain(unittest.TestCase):
    def setUp(self):
        self.work_dir = tempfile.mkdtemp()
        self.log_file = os.path.join(self.work_dir, 'migrator.log')

    def tearDown(self):
        shutil.rmtree(self.work_dir, ignore_errors=True)

    def test_file_mode(self):
        input_file = os.path.join(self.work_dir, 'report_views.sql')
        with open(input_file, 'w', encoding='utf-8') as file:
            file.write("CREATE VIEW [dbo].[vPatients] AS SELECT [Id], ISNULL([Name], '') AS [Name] FROM [Patients]\nGO\n")
        output_dir = os.path.join(self.work_dir, 'out')

        main(['--input', input_file, '--output-dir', output_dir, '--log-file', self.log_file])

        with open(os.path.join(output_dir, 'report_views.pg.sql'), 'r', encoding='utf-8') as file:
            output = file.read()
        self.assertIn('CREATE OR REPLACE VIEW "public"."vPatients" AS', output)
        self.assertIn('COALESCE("Name", \'\')', output)
        with open(self.log_file, 'r') as file:
            self.assertIn('Migration Done', file.read())

    def test_config_without_databases_fails(self):
        config_file = os.path.join(self.work_dir, 'config.yaml')
        with open(config_file, 'w') as file:
            file.write("migration:\n  on_error: continue\n")
        with self.assertRaises(SystemExit) as context:
            main(['--config', config_file, '--log-file', self.log_file])
        self.assertEqual(context.exception.code, 1)

if __name__ == '__main__':
    unittest.main()
