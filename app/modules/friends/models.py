# Supabase table: users (see app/modules/profiles/models.py)
# The friend graph has no table of its own.

"""
Friend data lives on the profile row:

users.friend_code: text, unique - generated once at profile creation, never edited
users.friends: text[] - ids this user added; directional, never contains users.id

Adding a friend appends to the requester's users.friends only.
"""
