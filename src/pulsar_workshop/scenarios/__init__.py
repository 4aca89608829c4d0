from .scenarios import app
