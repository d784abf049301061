"""
Crowd scoring and redirection module.
"""
