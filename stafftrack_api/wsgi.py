# stafftrack_api/wsgi.py
from stafftrack_api import create_app

app = create_app()
