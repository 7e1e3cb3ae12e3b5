"""Chronicle: a session-authenticated store of characters and articles."""
