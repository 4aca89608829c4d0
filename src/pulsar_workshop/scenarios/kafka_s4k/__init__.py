from .kafka_s4k import app
