from .native_pulsar import app
