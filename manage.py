#!/usr/bin/env python
"""
Entry point for the hospital management API.  It sets the default
settings module to ``hms.settings`` and delegates to Django's management
command line utility.  ``runserver`` without an explicit address binds to
the port named by the ``PORT`` environment variable.
"""
import os
import sys


def main() -> None:
    """Run administrative tasks for the Django project."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'hms.settings')
    try:
        from django.core.management import execute_from_command_line  # type: ignore
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc
    argv = list(sys.argv)
    if len(argv) == 2 and argv[1] == 'runserver':
        argv.append(f"0.0.0.0:{os.getenv('PORT', '8000')}")
    execute_from_command_line(argv)


if __name__ == '__main__':
    main()
