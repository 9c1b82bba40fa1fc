import os
import shutil
import tempfile
import unittest
from unittest.mock import MagicMock
from tsql_pg_migrator.report_generator import ReportGenerator
from tsql_pg_migrator.result_comparator import ResultComparator

class TestReportGenerator(unittest.TestCase):
    def setUp(self):
        self.output_dir = tempfile.mkdtemp()
        self.config_parser = MagicMock()
        self.config_parser.get_output_dir.return_value = self.output_dir
        self.config_parser.get_report_rows.return_value = 2
        self.config_parser.get_float_precision.return_value = 6
        self.config_parser.should_trim_strings.return_value = True
        self.report_generator = ReportGenerator(self.config_parser)

    def tearDown(self):
        shutil.rmtree(self.output_dir, ignore_errors=True)

    def make_validation(self, target_rows):
        source_result = {'columns': ['id', 'name'], 'rows': [(1, 'Anna'), (2, 'Ben'), (3, 'Cleo')], 'truncated': False}
        target_result = {'columns': ['id', 'name'], 'rows': target_rows, 'truncated': False}
        comparison = ResultComparator(self.config_parser).compare(source_result, target_result)
        return {
            'object_name': 'dbo.vPatients',
            'source_query': 'SELECT * FROM [dbo].[vPatients]',
            'target_query': 'SELECT * FROM "public"."vpatients"',
            'status': comparison['status'],
            'message': comparison['message'],
            'source_result': source_result,
            'target_result': target_result,
            'comparison': comparison,
            'issues': [],
            'target_sql': 'CREATE OR REPLACE VIEW "public"."vpatients" AS\nSELECT "id", "name" FROM "public"."patients";',
        }

    def test_report_starts_with_required_header(self):
        validation = self.make_validation([(1, 'Anna'), (2, 'Ben'), (3, 'Cleo')])
        report = self.report_generator.generate_validation_report(validation)
        lines = report.split('\n')
        self.assertEqual(lines[0], '# Validation Report: dbo.vPatients')
        self.assertEqual(lines[2], '**Test Query:** SELECT * FROM "public"."vpatients"')
        self.assertEqual(lines[4], '**Result Set:**')
        self.assertIn('Anna', report)
        self.assertNotIn('Cleo', report)
        self.assertIn('showing 2 of 3 rows', report)
        self.assertIn('**Status:** MATCH', report)
        self.assertIn('```sql', report)

    def test_report_lists_differences(self):
        validation = self.make_validation([(1, 'Anna'), (2, 'Benjamin')])
        validation['issues'] = [{'kind': 'type_mismatch', 'severity': 'WARNING', 'object': 'name', 'message': 'check collation'}]
        report = self.report_generator.generate_validation_report(validation)
        self.assertIn('**Status:** MISMATCH', report)
        self.assertIn('## Rows Missing in Target', report)
        self.assertIn('Cleo', report)
        self.assertIn('## Extra Rows in Target', report)
        self.assertIn('Benjamin', report)
        self.assertIn('## Translation Issues', report)
        self.assertIn('type_mismatch', report)

    def test_report_without_target_result(self):
        validation = {
            'object_name': 'dbo.vBroken',
            'target_query': 'SELECT * FROM "public"."vbroken"',
            'source_query': 'SELECT * FROM [dbo].[vBroken]',
            'status': 'ERROR',
            'message': 'View was not created in target database',
            'target_result': None,
            'comparison': None,
            'issues': [],
            'target_sql': None,
        }
        report = self.report_generator.generate_validation_report(validation)
        self.assertTrue(report.startswith('# Validation Report: dbo.vBroken\n\n**Test Query:** SELECT * FROM "public"."vbroken"\n\n**Result Set:**'))
        self.assertIn('_(not available)_', report)
        self.assertIn('**Details:** View was not created in target database', report)

    def test_write_reports(self):
        validation = self.make_validation([(1, 'Anna'), (2, 'Ben'), (3, 'Cleo')])
        path = self.report_generator.write_validation_report(validation)
        self.assertEqual(path, os.path.join(self.output_dir, 'dbo.vPatients.md'))
        self.assertTrue(os.path.exists(path))

        summary_path = self.report_generator.write_summary_report([validation])
        with open(summary_path, 'r', encoding='utf-8') as file:
            summary = file.read()
        self.assertTrue(summary.startswith('# Validation Summary'))
        self.assertIn('**Total:** 1, **Match:** 1, **Mismatch:** 0, **Inconclusive:** 0, **Error:** 0', summary)

    def test_report_file_name_is_sanitized(self):
        self.assertEqual(self.report_generator.get_report_file_name('dbo.[My View]'), 'dbo._My_View_.md')

if __name__ == '__main__':
    unittest.main()
