"""Embedding adapters and the batch dispatcher."""
