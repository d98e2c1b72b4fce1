"""HTTP interface for the qualitative screening bounded context."""
