"""
Per-table access rules.

The same table drives two things: the `requires_policy` view decorator and
the row level security migration for a PostgreSQL deployment.
"""
from functools import wraps

from flask import abort
from flask_login import current_user

from jewelry_catalog import login_manager

PUBLIC = "public"
AUTHENTICATED = "authenticated"

SELECT = "select"
INSERT = "insert"
UPDATE = "update"
DELETE = "delete"

# table -> operation -> (policy name, roles allowed)
POLICIES = {
    "categories": {
        SELECT: ("Categories are publicly readable", {PUBLIC, AUTHENTICATED}),
        INSERT: ("Only authenticated users can insert categories", {AUTHENTICATED}),
        UPDATE: ("Only authenticated users can update categories", {AUTHENTICATED}),
        DELETE: ("Only authenticated users can delete categories", {AUTHENTICATED}),
    },
    "jewelry_items": {
        SELECT: ("Jewelry items are publicly readable", {PUBLIC, AUTHENTICATED}),
        INSERT: ("Only authenticated users can insert jewelry items", {AUTHENTICATED}),
        UPDATE: ("Only authenticated users can update jewelry items", {AUTHENTICATED}),
        DELETE: ("Only authenticated users can delete jewelry items", {AUTHENTICATED}),
    },
    "admin_settings": {
        SELECT: ("Authenticated users can read admin settings", {AUTHENTICATED}),
        UPDATE: ("Authenticated users can update admin settings", {AUTHENTICATED}),
        INSERT: ("Authenticated users can insert admin settings", {AUTHENTICATED}),
    },
}


def is_allowed(table, operation, role):
    rule = POLICIES.get(table, {}).get(operation)
    if rule is None:
        return False
    return role in rule[1]


def current_role():
    return AUTHENTICATED if current_user.is_authenticated else PUBLIC


def requires_policy(table, operation):
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            role = current_role()
            if not is_allowed(table, operation, role):
                if role == PUBLIC:
                    return login_manager.unauthorized()
                abort(403)
            return view(*args, **kwargs)
        return wrapped
    return decorator


def _create_policy(table, operation, name, roles):
    # In PostgreSQL the built-in "public" role already includes authenticated users
    target = PUBLIC if PUBLIC in roles else AUTHENTICATED
    lines = [
        f'CREATE POLICY "{name}"',
        f"  ON {table}",
        f"  FOR {operation.upper()}",
        f"  TO {target}",
    ]
    if operation in (SELECT, UPDATE, DELETE):
        lines.append("  USING (true)")
    if operation in (INSERT, UPDATE):
        lines.append("  WITH CHECK (true)")
    return "\n".join(lines) + ";"


def render_policy_sql():
    """Idempotent migration: drop every policy, enable RLS, recreate the policies."""
    out = ["-- Drop all existing policies safely"]
    for table, rules in POLICIES.items():
        for name, _ in rules.values():
            out.append(f'DROP POLICY IF EXISTS "{name}" ON {table};')

    out.append("")
    out.append("-- Re-enable RLS (in case it was disabled)")
    for table in POLICIES:
        out.append(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;")

    for table, rules in POLICIES.items():
        out.append("")
        out.append(f"-- Policies for {table}")
        for operation, (name, roles) in rules.items():
            out.append(_create_policy(table, operation, name, roles))
            out.append("")

    return "\n".join(out).rstrip() + "\n"
