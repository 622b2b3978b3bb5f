"""HTTP value types — immutable requests, responses, and headers."""
