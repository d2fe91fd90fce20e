"""Protocol strategies for each Bedrock request/response generation."""
