"""Authentication and authorization.

Learn: Users log in with email/password and receive two JWTs:
1. Access token (short-lived) → sent on every call, cookie or Bearer header
2. Refresh token (long-lived) → only used to mint new access tokens

Every request re-reads the user from the database, so a token never
outlives a role change or an account deletion.
"""
