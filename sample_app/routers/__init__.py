"""API routers for the sample app."""
