"""Chat push: push-notification dispatch for event and message document changes."""
