"""Per-type decoders. Each module exports a DECODERS mapping of type code to decoder."""
