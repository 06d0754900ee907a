"""Release workflow services: versions, changelog, version files, gh."""
