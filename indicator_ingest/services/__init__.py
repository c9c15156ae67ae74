"""Upload services: orchestration, submission records, progress and summary output."""
