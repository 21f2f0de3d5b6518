"""
services/ — business logic. Routers stay thin and call into here.
"""
