"""Web panel for cuekeeper."""
