# Supabase Auth
# Identity is delegated to Supabase's built-in authentication system.
# No custom tables are required for auth itself - Supabase Auth handles:
# - User registration (auth.users table)
# - Email/password login and session management
# - JWT token issuing and validation

"""
Supabase Auth provides:
- auth.sign_up() - Register new users
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Resolve the current user from a JWT
- auth.sign_out() - Logout users

The auth user id is the primary key of the step profile in the users table
(see app/modules/profiles/models.py). The profile row is created on
registration, or on the first successful login when it is still missing.
The display name given at registration is kept in user_metadata["name"].
"""
