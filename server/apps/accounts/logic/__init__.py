"""Business logic layer for accounts app.

- Session store (create, look up, end, sweep)
- Authenticator (register, login, logout)
- Authorizer (the single RBAC decision procedure)
- User operations (profile, password, account deletion)

Views only translate requests into calls to these modules.
"""
