"""Conversation model, wire protocols, ports and the Bedrock client."""
