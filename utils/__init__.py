# Shared helpers for the bazaar backend apps
