"""Business logic for languages app."""
