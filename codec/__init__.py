"""Alphabet codec and check digits."""
