"""Request controllers. Each returns ``(data, status_code, headers)``."""
