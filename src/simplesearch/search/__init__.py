"""Scan-and-match engine and interactive search sessions."""
