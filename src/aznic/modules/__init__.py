"""Supporting modules: status display and user interaction."""
