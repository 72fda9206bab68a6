"""Hospital management app: models, REST API, services and real-time channel."""
