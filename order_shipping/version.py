"""Calculator version stamped on every calculation."""

VERSION = "2026.10.18"
