import datetime
import unittest
import uuid
from decimal import Decimal
from unittest.mock import MagicMock
from tsql_pg_migrator.result_comparator import ResultComparator

def make_comparator(float_precision=6, trim_strings=True):
    config_parser = MagicMock()
    config_parser.get_float_precision.return_value = float_precision
    config_parser.should_trim_strings.return_value = trim_strings
    return ResultComparator(config_parser)

def result_set(columns, rows, truncated=False):
    return {'columns': columns, 'rows': rows, 'truncated': truncated}

class TestNormalizeValue(unittest.TestCase):
    def setUp(self):
        self.comparator = make_comparator()

    def test_driver_representations(self):
        self.assertEqual(self.comparator.normalize_value(None), '<NULL>')
        self.assertEqual(self.comparator.normalize_value(True), '1')
        self.assertEqual(self.comparator.normalize_value(1), '1')
        self.assertEqual(self.comparator.normalize_value(Decimal('12.5000')), '12.5')
        self.assertEqual(self.comparator.normalize_value(Decimal('12.0000')), '12')
        self.assertEqual(self.comparator.normalize_value(2.0), '2')
        self.assertEqual(self.comparator.normalize_value(0.1 + 0.2), '0.3')
        self.assertEqual(self.comparator.normalize_value('abc   '), 'abc')
        self.assertEqual(self.comparator.normalize_value(b'\x01\xff'), '01ff')

    def test_uuid_case(self):
        value = uuid.UUID('6F9619FF-8B86-D011-B42D-00C04FC964FF')
        self.assertEqual(self.comparator.normalize_value(value),
                         self.comparator.normalize_value('6F9619FF-8B86-D011-B42D-00C04FC964FF'))

    def test_datetimes(self):
        self.assertEqual(self.comparator.normalize_value(datetime.datetime(2024, 1, 31, 12, 30)), '2024-01-31 12:30:00.000000')
        self.assertEqual(self.comparator.normalize_value(datetime.date(2024, 1, 31)), '2024-01-31')

    def test_strings_kept_when_trimming_disabled(self):
        self.assertEqual(make_comparator(trim_strings=False).normalize_value('abc  '), 'abc  ')

class TestCompare(unittest.TestCase):
    def setUp(self):
        self.comparator = make_comparator()

    def test_match_ignores_row_order_and_column_case(self):
        source = result_set(['Id', 'Active'], [(2, True), (1, False)])
        target = result_set(['id', 'active'], [(1, False), (2, True)])
        comparison = self.comparator.compare(source, target)
        self.assertEqual(comparison['status'], 'MATCH')
        self.assertEqual(comparison['source_rows'], 2)
        self.assertEqual(comparison['message'], '2 rows match')

    def test_duplicates_are_counted(self):
        source = result_set(['id'], [(1,), (1,), (2,)])
        target = result_set(['id'], [(1,), (2,), (2,)])
        comparison = self.comparator.compare(source, target)
        self.assertEqual(comparison['status'], 'MISMATCH')
        self.assertEqual(comparison['missing_in_target']['id'].tolist(), ['1'])
        self.assertEqual(comparison['extra_in_target']['id'].tolist(), ['2'])

    def test_missing_and_extra_columns(self):
        source = result_set(['id', 'name'], [(1, 'a')])
        target = result_set(['id', 'label'], [(1, 'a')])
        comparison = self.comparator.compare(source, target)
        self.assertEqual(comparison['status'], 'MISMATCH')
        self.assertEqual(comparison['missing_columns'], ['name'])
        self.assertEqual(comparison['extra_columns'], ['label'])
        self.assertIn('columns missing in target: name', comparison['message'])

    def test_no_common_columns(self):
        comparison = self.comparator.compare(result_set(['a'], [(1,)]), result_set(['b'], [(1,)]))
        self.assertEqual(comparison['status'], 'MISMATCH')
        self.assertEqual(comparison['message'], 'Result sets have no columns in common')

    def test_empty_results_match(self):
        comparison = self.comparator.compare(result_set(['id'], []), result_set(['id'], []))
        self.assertEqual(comparison['status'], 'MATCH')

    def test_ordered_comparison(self):
        source = result_set(['id'], [(1,), (2,), (3,)])
        target = result_set(['id'], [(2,), (1,)])
        comparison = self.comparator.compare(source, target, ordered=True)
        self.assertEqual(comparison['status'], 'MISMATCH')
        self.assertEqual(comparison['mismatched_positions'], [1, 2])
        self.assertEqual(comparison['missing_in_target']['id'].tolist(), ['3'])
        self.assertIn('row count differs', comparison['message'])

    def test_truncation_on_one_side(self):
        source = result_set(['id'], [(1,)], truncated=True)
        target = result_set(['id'], [(1,)])
        comparison = self.comparator.compare(source, target)
        self.assertEqual(comparison['status'], 'MISMATCH')
        self.assertIn('row limit', comparison['message'])

    def test_truncation_on_both_sides_is_inconclusive(self):
        # both engines return 3 of the same 5 rows, in a different choice
        source = result_set(['id', 'name'], [(1, 'a'), (2, 'b'), (3, 'c')], truncated=True)
        target = result_set(['id', 'name'], [(3, 'c'), (4, 'd'), (5, 'e')], truncated=True)
        comparison = self.comparator.compare(source, target)
        self.assertEqual(comparison['status'], 'INCONCLUSIVE')
        self.assertIn('row limit', comparison['message'])

    def test_truncation_on_both_sides_identical_rows_match(self):
        source = result_set(['id'], [(1,), (2,)], truncated=True)
        target = result_set(['id'], [(2,), (1,)], truncated=True)
        self.assertEqual(self.comparator.compare(source, target)['status'], 'MATCH')

    def test_truncation_on_both_sides_ordered_is_mismatch(self):
        source = result_set(['id'], [(1,), (2,), (3,)], truncated=True)
        target = result_set(['id'], [(3,), (4,), (5,)], truncated=True)
        comparison = self.comparator.compare(source, target, ordered=True)
        self.assertEqual(comparison['status'], 'MISMATCH')

if __name__ == '__main__':
    unittest.main()
