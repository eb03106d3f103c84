"""Gateway fetching and response formatting."""
