"""DDL for the persistent resource and permission catalog."""

RESOURCES_TABLE = "authz_resources"
PERMISSIONS_TABLE = "authz_permissions"

CATALOG_SCHEMA_DDL = f"""
CREATE TABLE IF NOT EXISTS {RESOURCES_TABLE} (
    id            TEXT PRIMARY KEY,
    name          TEXT NOT NULL UNIQUE,
    description   TEXT NOT NULL DEFAULT '',
    actions       TEXT[] NOT NULL,
    category      TEXT NOT NULL,
    default_scope TEXT,
    is_system     BOOLEAN NOT NULL DEFAULT FALSE,
    created_at    TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at    TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS {PERMISSIONS_TABLE} (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL UNIQUE,
    description TEXT NOT NULL DEFAULT '',
    resource    TEXT NOT NULL,
    action      TEXT NOT NULL,
    scope       TEXT,
    category    TEXT NOT NULL,
    is_system   BOOLEAN NOT NULL DEFAULT FALSE,
    created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_{PERMISSIONS_TABLE}_resource ON {PERMISSIONS_TABLE} (resource);
"""
