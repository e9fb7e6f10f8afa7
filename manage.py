#!/usr/bin/env python
"""
Command-line entry point for the health records backend.

Besides Django's built-in commands the ``records`` app adds
``seed_demo_data``, ``ensure_test_users`` and ``refresh_caches``.
"""
import os
import sys


def main() -> None:
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'healthadmin.settings')
    from django.core.management import execute_from_command_line

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
