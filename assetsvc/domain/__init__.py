"""Chart records, errors and the lookup service."""
