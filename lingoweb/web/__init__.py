"""Web interface for LingoWeb."""
