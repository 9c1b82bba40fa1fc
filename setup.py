from setuptools import setup, find_packages

setup(
    name='tsql-pg-migrator',
    version='0.1.0',
    url='https://github.com/credativ/tsql-pg-migrator.git',
    author='Josef Machytka',
    author_email='josef.machytka@credativ.de',
    description='Migrator of SQL Server views and T-SQL queries into PostgreSQL with result validation',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=['sqlglot>=25.0,<31', 'psycopg2-binary', 'jaydebeapi', 'pyyaml', 'pandas', 'pyodbc', 'tabulate'],
    extras_require={'test': ['pytest']},
    entry_points={'console_scripts': ['tsql-pg-migrator = tsql_pg_migrator:main']},
)
