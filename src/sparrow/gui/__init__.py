"""Qt integration: background workers and the render controller."""
