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

import os
import re
from datetime import datetime
from tabulate import tabulate

class ReportGenerator:
    """
    Markdown validation reports. Each report starts with

        # Validation Report: <object_name>
        **Test Query:** <SQL>
        **Result Set:** <tabular text>

    followed by details of the comparison with the source database.
    """

    def __init__(self, config_parser):
        self.config_parser = config_parser
        self.output_dir = config_parser.get_output_dir()
        self.report_rows = config_parser.get_report_rows()

    def format_rows(self, columns, rows, total_rows=None):
        if not columns:
            return "_(no columns)_"
        if not rows:
            return "_(no rows)_"
        total_rows = len(rows) if total_rows is None else total_rows
        shown_rows = [["" if value is None else value for value in row] for row in rows[:self.report_rows]]
        table = tabulate(shown_rows, headers=columns, tablefmt="github")
        if total_rows > len(shown_rows):
            table += f"\n\n_(showing {len(shown_rows)} of {total_rows} rows)_"
        return table

    def format_result_set(self, result_set):
        table = self.format_rows(result_set['columns'], result_set['rows'])
        if result_set.get('truncated'):
            table += "\n\n_(result set truncated by validation.max_rows)_"
        return table

    def format_dataframe(self, df):
        return self.format_rows(list(df.columns), df.values.tolist())

    def generate_validation_report(self, validation):
        lines = []
        lines.append(f"# Validation Report: {validation['object_name']}")
        lines.append("")
        lines.append(f"**Test Query:** {validation.get('target_query') or ''}")
        lines.append("")
        lines.append("**Result Set:**")
        lines.append("")
        if validation.get('target_result'):
            lines.append(self.format_result_set(validation['target_result']))
        else:
            lines.append("_(not available)_")
        lines.append("")
        lines.append(f"**Source Query:** {validation.get('source_query') or ''}")
        lines.append("")
        lines.append(f"**Status:** {validation['status']}")
        if validation.get('message'):
            lines.append("")
            lines.append(f"**Details:** {validation['message']}")

        comparison = validation.get('comparison')
        if comparison:
            lines.append("")
            lines.append(f"**Row Counts:** source {comparison['source_rows']}, target {comparison['target_rows']}")
            if comparison['missing_columns'] or comparison['extra_columns']:
                lines.append("")
                lines.append("## Column Differences")
                lines.append("")
                rows = [[column, 'missing in target'] for column in comparison['missing_columns']]
                rows += [[column, 'extra in target'] for column in comparison['extra_columns']]
                lines.append(tabulate(rows, headers=['Column', 'Difference'], tablefmt="github"))
            if len(comparison['missing_in_target']):
                lines.append("")
                lines.append("## Rows Missing in Target")
                lines.append("")
                lines.append(self.format_dataframe(comparison['missing_in_target']))
            if len(comparison['extra_in_target']):
                lines.append("")
                lines.append("## Extra Rows in Target")
                lines.append("")
                lines.append(self.format_dataframe(comparison['extra_in_target']))
            if comparison['mismatched_positions']:
                lines.append("")
                lines.append("## Rows Differing by Position")
                lines.append("")
                lines.append(", ".join(str(position) for position in comparison['mismatched_positions'][:self.report_rows]))

        if validation.get('issues'):
            lines.append("")
            lines.append("## Translation Issues")
            lines.append("")
            rows = [[issue['severity'], issue['kind'], issue['object'], issue['message']] for issue in validation['issues']]
            lines.append(tabulate(rows, headers=['Severity', 'Kind', 'Object', 'Message'], tablefmt="github"))

        if validation.get('target_sql'):
            lines.append("")
            lines.append("## Converted Definition")
            lines.append("")
            lines.append("```sql")
            lines.append(validation['target_sql'])
            lines.append("```")

        lines.append("")
        return "\n".join(lines)

    def generate_summary_report(self, validations):
        lines = []
        lines.append("# Validation Summary")
        lines.append("")
        lines.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        lines.append("")
        rows = []
        for validation in validations:
            comparison = validation.get('comparison') or {}
            rows.append([
                validation['object_name'],
                validation['status'],
                comparison.get('source_rows', ''),
                comparison.get('target_rows', ''),
                len(validation.get('issues') or []),
            ])
        if rows:
            lines.append(tabulate(rows, headers=['Object', 'Status', 'Source Rows', 'Target Rows', 'Issues'], tablefmt="github"))
        else:
            lines.append("_(nothing validated)_")
        statuses = [validation['status'] for validation in validations]
        lines.append("")
        lines.append(f"**Total:** {len(statuses)}, **Match:** {statuses.count('MATCH')}, "
                     f"**Mismatch:** {statuses.count('MISMATCH')}, **Inconclusive:** {statuses.count('INCONCLUSIVE')}, "
                     f"**Error:** {statuses.count('ERROR')}")
        lines.append("")
        return "\n".join(lines)

    def get_report_file_name(self, object_name, extension='md'):
        return re.sub(r'[^A-Za-z0-9_.-]+', '_', object_name) + '.' + extension

    def write_file(self, file_name, content):
        os.makedirs(self.output_dir, exist_ok=True)
        path = os.path.join(self.output_dir, file_name)
        with open(path, 'w', encoding='utf-8') as file:
            file.write(content)
        self.config_parser.print_log_message('DEBUG', f"Written {path}")
        return path

    def write_validation_report(self, validation):
        content = self.generate_validation_report(validation)
        return self.write_file(self.get_report_file_name(validation['object_name']), content)

    def write_summary_report(self, validations):
        return self.write_file('summary.md', self.generate_summary_report(validations))

if __name__ == "__main__":
    print("This script is not meant to be run directly")
