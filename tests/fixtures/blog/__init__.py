"""Sample blog application used as managed classes in tests."""
