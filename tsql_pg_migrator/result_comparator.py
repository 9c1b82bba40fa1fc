# tsql-pg-migrator
# Copyright (C) 2025 credativ GmbH
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import re
import math
import uuid
import datetime
from decimal import Decimal
import pandas as pd
from tsql_pg_migrator.constants import MigratorConstants

UUID_PATTERN = re.compile(r'^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$')
OCCURRENCE_COLUMN = '__occurrence'

class ResultComparator:
    """
    Compares result sets of the same query executed in SQL Server and PostgreSQL.
    Values are normalized to strings first, so representation differences between
    the drivers (bit vs boolean, Decimal scale, CHAR padding, UUID case) do not count.
    """

    def __init__(self, config_parser):
        self.config_parser = config_parser
        self.float_precision = config_parser.get_float_precision()
        self.trim_strings = config_parser.should_trim_strings()
        self.null_marker = MigratorConstants.get_null_marker()

    def normalize_value(self, value):
        if value is None:
            return self.null_marker
        if isinstance(value, bool):
            return '1' if value else '0'
        if isinstance(value, Decimal):
            if value == value.to_integral_value():
                return str(value.quantize(Decimal(1)))
            return format(value.normalize(), 'f')
        if isinstance(value, float):
            if not math.isfinite(value):
                return str(value)
            rounded = round(value, self.float_precision)
            if rounded == int(rounded):
                return str(int(rounded))
            return repr(rounded)
        if isinstance(value, int):
            return str(value)
        if isinstance(value, datetime.datetime):
            return value.strftime('%Y-%m-%d %H:%M:%S.%f')
        if isinstance(value, (datetime.date, datetime.time)):
            return value.isoformat()
        if isinstance(value, datetime.timedelta):
            return str(value.total_seconds())
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value).hex()
        if isinstance(value, uuid.UUID):
            return str(value).lower()
        value = str(value)
        if self.trim_strings:
            value = value.rstrip()
        if UUID_PATTERN.match(value):
            value = value.lower()
        return value

    def to_dataframe(self, result_set):
        columns = [str(column).lower() for column in result_set['columns']]
        return pd.DataFrame([list(row) for row in result_set['rows']], columns=columns, dtype=object)

    def normalize_dataframe(self, df):
        normalized = df.copy()
        for column in normalized.columns:
            normalized[column] = [self.normalize_value(value) for value in normalized[column]]
        return normalized

    def compare(self, source_result, target_result, ordered=False):
        source_df = self.normalize_dataframe(self.to_dataframe(source_result))
        target_df = self.normalize_dataframe(self.to_dataframe(target_result))

        source_columns = list(source_df.columns)
        target_columns = list(target_df.columns)
        missing_columns = [column for column in source_columns if column not in target_columns]
        extra_columns = [column for column in target_columns if column not in source_columns]
        common_columns = [column for column in source_columns if column in target_columns]

        comparison = {
            'status': 'MATCH',
            'source_rows': len(source_df),
            'target_rows': len(target_df),
            'source_truncated': source_result.get('truncated', False),
            'target_truncated': target_result.get('truncated', False),
            'columns': common_columns,
            'missing_columns': missing_columns,
            'extra_columns': extra_columns,
            'missing_in_target': pd.DataFrame(columns=common_columns),
            'extra_in_target': pd.DataFrame(columns=common_columns),
            'mismatched_positions': [],
            'message': '',
        }

        if not common_columns:
            comparison['status'] = 'MISMATCH'
            comparison['message'] = 'Result sets have no columns in common'
            return comparison

        source_df = source_df[common_columns]
        target_df = target_df[common_columns]

        if ordered:
            self.compare_ordered(source_df, target_df, comparison)
        else:
            self.compare_unordered(source_df, target_df, comparison)

        messages = []
        if missing_columns:
            messages.append(f"columns missing in target: {', '.join(missing_columns)}")
        if extra_columns:
            messages.append(f"extra columns in target: {', '.join(extra_columns)}")
        if comparison['source_rows'] != comparison['target_rows']:
            messages.append(f"row count differs: source {comparison['source_rows']}, target {comparison['target_rows']}")
        if len(comparison['missing_in_target']) or len(comparison['extra_in_target']):
            messages.append(f"{len(comparison['missing_in_target'])} rows missing in target, {len(comparison['extra_in_target'])} extra rows in target")
        if comparison['mismatched_positions']:
            messages.append(f"{len(comparison['mismatched_positions'])} rows differ by position")
        if comparison['source_truncated'] != comparison['target_truncated']:
            messages.append("only one side exceeded the row limit")

        rows_differ = (len(comparison['missing_in_target']) or len(comparison['extra_in_target'])
                       or comparison['mismatched_positions'])
        if (messages and rows_differ and not ordered and not missing_columns and not extra_columns
                and comparison['source_truncated'] and comparison['target_truncated']):
            # Unordered queries cut at max_rows return arbitrary subsets on each side
            comparison['status'] = 'INCONCLUSIVE'
            comparison['message'] = (f"both result sets exceed the row limit of {comparison['source_rows']} rows, "
                                     "row differences are not conclusive; raise validation.max_rows or validate with an ordered query")
        elif messages:
            comparison['status'] = 'MISMATCH'
            comparison['message'] = '; '.join(messages)
        else:
            comparison['message'] = f"{comparison['source_rows']} rows match"
        self.config_parser.print_log_message('DEBUG', f"Comparison result: {comparison['status']} - {comparison['message']}")
        return comparison

    def compare_unordered(self, source_df, target_df, comparison):
        # Duplicated rows are numbered, so the comparison works on multisets
        columns = list(source_df.columns)
        source_df = source_df.assign(**{OCCURRENCE_COLUMN: source_df.groupby(columns, sort=False).cumcount()})
        target_df = target_df.assign(**{OCCURRENCE_COLUMN: target_df.groupby(columns, sort=False).cumcount()})
        merged = source_df.merge(target_df, how='outer', on=columns + [OCCURRENCE_COLUMN], indicator=True)

        missing = merged[merged['_merge'] == 'left_only'][columns]
        extra = merged[merged['_merge'] == 'right_only'][columns]
        comparison['missing_in_target'] = missing.sort_values(by=columns).reset_index(drop=True)
        comparison['extra_in_target'] = extra.sort_values(by=columns).reset_index(drop=True)

    def compare_ordered(self, source_df, target_df, comparison):
        columns = list(source_df.columns)
        common_length = min(len(source_df), len(target_df))
        for position in range(common_length):
            if list(source_df.iloc[position]) != list(target_df.iloc[position]):
                comparison['mismatched_positions'].append(position + 1)
        comparison['missing_in_target'] = source_df.iloc[common_length:][columns].reset_index(drop=True)
        comparison['extra_in_target'] = target_df.iloc[common_length:][columns].reset_index(drop=True)

if __name__ == "__main__":
    print("This script is not meant to be run directly")
