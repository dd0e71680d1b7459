"""Pier Repostería bakery-shop backend."""
