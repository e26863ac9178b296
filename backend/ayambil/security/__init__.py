"""Request hardening and log scrubbing."""
