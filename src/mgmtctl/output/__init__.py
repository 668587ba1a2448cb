"""Rich console rendering of service results, views, and notifications."""
