"""
Repositories

Async data access over the SQLAlchemy session, grouped by resource:
    - users: accounts, role grants, auth-token allow-list
    - franchises: franchises, franchisee admins, stores
    - orders: menu and diner orders
"""
