"""Table names and column registry.

Column lists double as an identifier whitelist for generated SQL.
"""

PARTICIPANTS = "participants"
PROFILES = "profiles"
SESSIONS = "kajian_sessions"
ATTENDANCE = "attendance"
INVITATIONS = "participant_invitations"
ACCOUNTS = "accounts"

COLUMNS: dict[str, tuple[str, ...]] = {
    ACCOUNTS: ("id", "email", "password_hash", "created_at"),
    PARTICIPANTS: (
        "id",
        "name",
        "email",
        "phone",
        "qr_code",
        "is_blacklisted",
        "blacklist_reason",
        "created_at",
        "updated_at",
    ),
    PROFILES: ("id", "email", "role", "participant_id", "created_at", "updated_at"),
    SESSIONS: (
        "id",
        "title",
        "description",
        "date",
        "start_time",
        "end_time",
        "location",
        "max_participants",
        "is_active",
        "created_by",
        "created_at",
        "updated_at",
    ),
    ATTENDANCE: (
        "id",
        "participant_id",
        "session_id",
        "check_in_time",
        "check_out_time",
        "status",
        "notes",
        "created_at",
    ),
    INVITATIONS: (
        "id",
        "name",
        "email",
        "phone",
        "token",
        "created_by",
        "created_at",
        "expires_at",
        "used",
    ),
}

# Unique keys besides the primary key `id`.
UNIQUE_KEYS: dict[str, tuple[tuple[str, ...], ...]] = {
    ACCOUNTS: (("email",),),
    ATTENDANCE: (("participant_id", "session_id"),),
    INVITATIONS: (("token",),),
}


def columns_for(table: str) -> tuple[str, ...]:
    try:
        return COLUMNS[table]
    except KeyError:
        raise ValueError(f"Unknown table: {table!r}") from None
