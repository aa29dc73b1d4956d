"""Output layer — Rich console theme, traffic printing, result formatting."""
