"""Phase engine."""
