"""Preview pipeline."""
