"""
WSGI config for plagdetect_project.

It exposes the WSGI callable as a module-level variable named ``application``.
"""
import os
from pathlib import Path

from django.core.wsgi import get_wsgi_application
from dotenv import load_dotenv

# Same `.env` that manage.py reads, next to manage.py.
load_dotenv(Path(__file__).resolve().parent.parent / '.env')

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'plagdetect_project.settings')

application = get_wsgi_application()
