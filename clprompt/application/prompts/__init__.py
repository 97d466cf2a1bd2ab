"""
Application-layer prompts for the code, summary and assistant services.
"""
