"""Controllers, workers and widgets of the project image editor."""
