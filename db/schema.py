from __future__ import annotations

import sqlite3


def bootstrap(conn: sqlite3.Connection) -> None:
    """Create profile, run and audit tables plus indexes (idempotent)."""
    cur = conn.cursor()

    # Profiles table; list-valued fields are stored as JSON text
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS linkedin_profiles (\n"
            "  id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "  linkedin_id TEXT NOT NULL UNIQUE,\n"
            "  full_name TEXT NOT NULL DEFAULT '',\n"
            "  headline TEXT,\n"
            "  location TEXT,\n"
            "  summary TEXT,\n"
            "  experience_json TEXT NOT NULL DEFAULT '[]',\n"
            "  education_json TEXT NOT NULL DEFAULT '[]',\n"
            "  skills_json TEXT NOT NULL DEFAULT '[]',\n"
            "  connections_count INTEGER,\n"
            "  profile_url TEXT NOT NULL DEFAULT '',\n"
            "  profile_image_url TEXT,\n"
            "  banner_image_url TEXT,\n"
            "  data_hash TEXT NOT NULL,\n"
            "  validation_status TEXT NOT NULL DEFAULT 'pending',\n"
            "  validation_errors_json TEXT NOT NULL DEFAULT '[]',\n"
            "  created_at TEXT NOT NULL,\n"
            "  updated_at TEXT NOT NULL,\n"
            "  last_validated_at TEXT\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_profiles_updated_at ON linkedin_profiles(updated_at);")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_profiles_validation_status ON linkedin_profiles(validation_status);")

    # ETL runs
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS etl_runs (\n"
            "  id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "  run_type TEXT NOT NULL,\n"
            "  status TEXT NOT NULL DEFAULT 'running',\n"
            "  started_at TEXT NOT NULL,\n"
            "  completed_at TEXT,\n"
            "  profiles_processed INTEGER NOT NULL DEFAULT 0,\n"
            "  profiles_added INTEGER NOT NULL DEFAULT 0,\n"
            "  profiles_updated INTEGER NOT NULL DEFAULT 0,\n"
            "  profiles_unchanged INTEGER NOT NULL DEFAULT 0,\n"
            "  images_processed INTEGER NOT NULL DEFAULT 0,\n"
            "  validation_failures INTEGER NOT NULL DEFAULT 0,\n"
            "  error_message TEXT,\n"
            "  metadata_json TEXT NOT NULL DEFAULT '{}'\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_etl_runs_started_at ON etl_runs(started_at);")

    # Append-only field audit
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS profile_changes (\n"
            "  id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "  profile_id INTEGER NOT NULL,\n"
            "  etl_run_id INTEGER,\n"
            "  field_name TEXT NOT NULL,\n"
            "  old_value TEXT,\n"
            "  new_value TEXT,\n"
            "  changed_at TEXT NOT NULL,\n"
            "  FOREIGN KEY(profile_id) REFERENCES linkedin_profiles(id) ON DELETE CASCADE,\n"
            "  FOREIGN KEY(etl_run_id) REFERENCES etl_runs(id) ON DELETE SET NULL\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_profile_changes_profile ON profile_changes(profile_id);")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_profile_changes_run ON profile_changes(etl_run_id);")

    # Image references (URL fingerprints only)
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS profile_images (\n"
            "  id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "  profile_id INTEGER NOT NULL,\n"
            "  image_type TEXT NOT NULL,\n"
            "  image_url TEXT NOT NULL,\n"
            "  image_hash TEXT NOT NULL,\n"
            "  is_current INTEGER NOT NULL DEFAULT 1,\n"
            "  created_at TEXT NOT NULL,\n"
            "  FOREIGN KEY(profile_id) REFERENCES linkedin_profiles(id) ON DELETE CASCADE\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_profile_images_current ON profile_images(profile_id, image_type, is_current);")

    # File/API import log
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS user_imports (\n"
            "  id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "  import_type TEXT NOT NULL,\n"
            "  file_name TEXT NOT NULL,\n"
            "  total_records INTEGER NOT NULL DEFAULT 0,\n"
            "  successful_records INTEGER NOT NULL DEFAULT 0,\n"
            "  failed_records INTEGER NOT NULL DEFAULT 0,\n"
            "  error_message TEXT,\n"
            "  created_at TEXT NOT NULL\n"
            ")"
        )
    )

    conn.commit()
