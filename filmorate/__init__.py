"""
Filmorate core: films, users, friendships and likes kept in memory.
"""
