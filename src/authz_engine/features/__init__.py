"""Feature modules of the authorization engine."""
