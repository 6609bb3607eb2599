"""
PATH: manage.py

Django management entrypoint.

- DJANGO_SETTINGS_MODULE unset, or pointing at the settings *package*
  ("backend.settings"), is forced to "backend.settings.dev".
- Production sets DJANGO_SETTINGS_MODULE=backend.settings.prod explicitly.

Bootstrap hook:
- RUN_CREATE_SUPERUSER=True creates the AUTO_ADMIN_USERNAME superuser
  (idempotent) before the command runs. Unset it once an admin exists.
"""

from __future__ import annotations

import os
import sys


def _ensure_settings_module() -> None:
    current = (os.environ.get("DJANGO_SETTINGS_MODULE") or "").strip()

    if not current or current == "backend.settings":
        os.environ["DJANGO_SETTINGS_MODULE"] = "backend.settings.dev"


def _create_superuser_if_requested() -> None:
    if os.environ.get("RUN_CREATE_SUPERUSER") != "True":
        return

    password = (os.environ.get("AUTO_ADMIN_PASSWORD") or "").strip()
    if not password:
        print("RUN_CREATE_SUPERUSER set but AUTO_ADMIN_PASSWORD is empty; skipping.", file=sys.stderr)
        return

    import django

    django.setup()

    from django.contrib.auth import get_user_model

    User = get_user_model()

    username = os.environ.get("AUTO_ADMIN_USERNAME", "admin")
    email = os.environ.get("AUTO_ADMIN_EMAIL", "")

    if not User.objects.filter(username=username).exists():
        User.objects.create_superuser(username=username, email=email, password=password)
        print(f"Superuser {username!r} created.")
    else:
        print(f"Superuser {username!r} already exists.")


def main() -> None:
    _ensure_settings_module()

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    _create_superuser_if_requested()

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
