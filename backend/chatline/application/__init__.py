"""
APPLICATION LAYER - Use cases (commands and queries) over the domain.
"""
