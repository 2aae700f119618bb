# Supabase Auth
# This module uses Supabase's built-in authentication system
# Supabase Auth handles:
# - User registration (auth.users table)
# - Password checks, session and refresh token issuance
# - JWT validation
#
# Each browser session is mirrored by a SessionContext (app/modules/session),
# which owns a Supabase client whose auth state lives in a per-session key store.

"""
Supabase Auth provides:
- auth.sign_up() - Register new users (first_name/last_name in user_metadata)
- auth.sign_in_with_password() - Authenticate users
- auth.get_session() - Current session, refreshed when expired
- auth.get_user(jwt) - Verify an access token
- auth.on_auth_state_change() - SIGNED_IN, SIGNED_OUT, TOKEN_REFRESHED, ... events
- auth.sign_out() - Logout users

The user's reader/publisher role lives in the user_roles table (see roles/models.py).
"""
