"""Demonlist API: record lifecycle engine and cursor pagination."""
