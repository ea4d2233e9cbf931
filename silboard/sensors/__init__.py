"""Simulated sensor models."""
