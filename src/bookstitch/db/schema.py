# ABOUTME: SQL DDL statements for the canonical books table.
# ABOUTME: Defines the ISBN uniqueness constraint that serializes concurrent inserts.

SCHEMA_V1 = """
-- Canonical book table: one row per real-world book
CREATE TABLE books (
    id                      INTEGER PRIMARY KEY AUTOINCREMENT,
    title                   TEXT NOT NULL CHECK (length(trim(title)) > 0),
    author                  TEXT,
    isbn                    TEXT UNIQUE,
    google_books_id         TEXT,
    openlibrary_work_key    TEXT,
    openlibrary_edition_key TEXT,
    total_pages             INTEGER CHECK (total_pages IS NULL OR total_pages > 0),
    description             TEXT,
    cover_url               TEXT,
    created_at              TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    updated_at              TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

CREATE INDEX idx_books_google_books_id ON books(google_books_id)
    WHERE google_books_id IS NOT NULL;
CREATE INDEX idx_books_ol_work ON books(openlibrary_work_key)
    WHERE openlibrary_work_key IS NOT NULL;
CREATE INDEX idx_books_ol_edition ON books(openlibrary_edition_key)
    WHERE openlibrary_edition_key IS NOT NULL;
CREATE INDEX idx_books_title_author ON books(title, author);

-- Schema versioning for future migrations
CREATE TABLE schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

INSERT INTO schema_version (version) VALUES (1);
"""

# V2: numeric OpenLibrary cover id, the source for a derivable cover URL.
MIGRATION_V2 = """
ALTER TABLE books ADD COLUMN openlibrary_cover_id INTEGER
    CHECK (openlibrary_cover_id IS NULL OR openlibrary_cover_id > 0);

INSERT INTO schema_version (version) VALUES (2);
"""

# V3: when backfill last tried a book, so repeated runs rotate through the table.
MIGRATION_V3 = """
ALTER TABLE books ADD COLUMN enrichment_attempted_at TEXT;

INSERT INTO schema_version (version) VALUES (3);
"""

MIGRATIONS: list[tuple[int, str]] = [
    (2, MIGRATION_V2),
    (3, MIGRATION_V3),
]

LATEST_VERSION = 3
