"""
Vercel serverless function for the StudyFlow API.
Vercel does not install the project, so the backend directory is put on the
import path before the app factory is imported.
"""
import os
import sys

BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'backend'))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from studyflow import create_app, db  # noqa: E402

app = create_app()

# Serverless instances start from an empty /tmp database
with app.app_context():
    db.create_all()
