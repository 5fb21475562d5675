#!/usr/bin/env python
"""
Command-line entry point for the SD Dental backend.

Defaults ``DJANGO_SETTINGS_MODULE`` to ``clinic.settings``; besides the
stock Django commands this exposes ``ensure_staff_users``,
``seed_treatment_pricing`` and ``refresh_insurer_cache``.
"""
import os
import sys


def main() -> None:
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'clinic.settings')
    try:
        from django.core.management import execute_from_command_line  # type: ignore
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
