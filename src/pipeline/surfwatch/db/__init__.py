"""Risk-event and monitoring data providers."""
