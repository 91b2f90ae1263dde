"""Dashboard web interface."""
