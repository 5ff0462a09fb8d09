"""External AI services.

Model access for the reasoning pipeline lives in warden.providers.llm.
"""
