"""001 – Initial schema: accounts, profiles, attendance, leave, payroll, notifications, audit.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-01-03 04:08:29.000000+00:00
"""

from alembic import op

# Revision identifiers
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

ENUM_TYPES: list[tuple[str, list[str]]] = [
    ("app_role", ["employee", "admin"]),
    ("attendance_status", ["present", "absent", "half-day", "leave"]),
    ("leave_type", ["paid", "sick", "unpaid"]),
    ("leave_status", ["pending", "approved", "rejected"]),
    ("payment_status", ["pending", "paid"]),
]


def _create_enum(name: str, values: list[str]) -> None:
    vals = ", ".join(f"'{v}'" for v in values)
    op.execute(f"CREATE TYPE {name} AS ENUM ({vals})")


def _drop_enum(name: str) -> None:
    op.execute(f"DROP TYPE IF EXISTS {name}")


# ---------------------------------------------------------------------------
# UPGRADE
# ---------------------------------------------------------------------------


def upgrade() -> None:
    # ── Extensions ────────────────────────────────────────────────────────
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')

    # ── Enum types ────────────────────────────────────────────────────────
    for name, values in ENUM_TYPES:
        _create_enum(name, values)

    # ── 1. users ──────────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE users (
            id              UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            email           VARCHAR(255) NOT NULL UNIQUE,
            password_hash   VARCHAR(255) NOT NULL,
            is_active       BOOLEAN NOT NULL DEFAULT TRUE,
            created_at      TIMESTAMPTZ DEFAULT NOW()
        )
    """)
    op.execute("CREATE UNIQUE INDEX idx_users_email_lower ON users (LOWER(email))")

    # ── 2. user_sessions ─────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE user_sessions (
            id          UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id     UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            token_hash  VARCHAR(512) NOT NULL,
            ip_address  INET,
            user_agent  TEXT,
            expires_at  TIMESTAMPTZ NOT NULL,
            is_revoked  BOOLEAN NOT NULL DEFAULT FALSE,
            created_at  TIMESTAMPTZ DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX ix_user_sessions_token_hash ON user_sessions (token_hash)")

    # ── 3. profiles ──────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE profiles (
            id               UUID PRIMARY KEY REFERENCES users(id) ON DELETE CASCADE,
            employee_id      VARCHAR(50) NOT NULL UNIQUE,
            email            VARCHAR(255) NOT NULL,
            full_name        VARCHAR(200) DEFAULT '',
            phone            VARCHAR(30),
            address          TEXT,
            department       VARCHAR(100),
            designation      VARCHAR(100),
            date_of_joining  DATE,
            profile_image    VARCHAR(500),
            basic_salary     NUMERIC(10,2),
            role             app_role NOT NULL DEFAULT 'employee',
            is_first_login   BOOLEAN NOT NULL DEFAULT FALSE,
            created_at       TIMESTAMPTZ DEFAULT NOW(),
            updated_at       TIMESTAMPTZ DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX idx_profiles_role ON profiles (role)")

    # ── 4. attendance ────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE attendance (
            id          UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id     UUID NOT NULL REFERENCES profiles(id) ON DELETE CASCADE,
            date        DATE NOT NULL,
            check_in    TIMESTAMPTZ,
            check_out   TIMESTAMPTZ,
            status      attendance_status NOT NULL DEFAULT 'present',
            created_at  TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT uq_attendance_user_date UNIQUE (user_id, date)
        )
    """)
    op.execute("CREATE INDEX ix_attendance_user_id ON attendance (user_id)")
    op.execute("CREATE INDEX idx_attendance_date ON attendance (date)")

    # ── 5. leave_requests ────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE leave_requests (
            id             UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id        UUID NOT NULL REFERENCES profiles(id) ON DELETE CASCADE,
            leave_type     leave_type NOT NULL,
            start_date     DATE NOT NULL,
            end_date       DATE NOT NULL,
            remarks        TEXT,
            status         leave_status NOT NULL DEFAULT 'pending',
            admin_comment  TEXT,
            approved_by    UUID REFERENCES profiles(id),
            created_at     TIMESTAMPTZ DEFAULT NOW(),
            updated_at     TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT ck_leave_dates CHECK (end_date >= start_date)
        )
    """)
    op.execute("CREATE INDEX ix_leave_requests_user_id ON leave_requests (user_id)")
    op.execute("CREATE INDEX idx_leave_requests_status ON leave_requests (status)")

    # ── 6. payroll ───────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE payroll (
            id              UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id         UUID NOT NULL REFERENCES profiles(id) ON DELETE CASCADE,
            month           INTEGER NOT NULL,
            year            INTEGER NOT NULL,
            basic_salary    NUMERIC(10,2) NOT NULL,
            allowances      NUMERIC(10,2) NOT NULL DEFAULT 0,
            deductions      NUMERIC(10,2) NOT NULL DEFAULT 0,
            net_salary      NUMERIC(12,2)
                GENERATED ALWAYS AS (basic_salary + allowances - deductions) STORED,
            payment_status  payment_status NOT NULL DEFAULT 'pending',
            created_at      TIMESTAMPTZ DEFAULT NOW(),
            updated_at      TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT uq_payroll_user_period UNIQUE (user_id, month, year),
            CONSTRAINT ck_payroll_month CHECK (month BETWEEN 1 AND 12)
        )
    """)
    op.execute("CREATE INDEX ix_payroll_user_id ON payroll (user_id)")

    # ── 7. notifications ─────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE notifications (
            id          UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id     UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            title       VARCHAR(200) NOT NULL,
            message     TEXT NOT NULL,
            read        BOOLEAN NOT NULL DEFAULT FALSE,
            created_at  TIMESTAMPTZ DEFAULT NOW()
        )
    """)
    op.execute(
        "CREATE INDEX ix_notifications_user_id ON notifications (user_id, created_at DESC)"
    )

    # ── 8. audit_logs ────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE audit_logs (
            id              UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            action          VARCHAR(100) NOT NULL,
            performed_by    UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            target_user_id  UUID REFERENCES users(id) ON DELETE CASCADE,
            details         JSONB,
            created_at      TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX ix_audit_logs_performed_by ON audit_logs (performed_by)")
    op.execute("CREATE INDEX ix_audit_logs_created_at ON audit_logs (created_at)")


# ---------------------------------------------------------------------------
# DOWNGRADE
# ---------------------------------------------------------------------------


def downgrade() -> None:
    # Drop tables in reverse dependency order
    tables = [
        "audit_logs",
        "notifications",
        "payroll",
        "leave_requests",
        "attendance",
        "profiles",
        "user_sessions",
        "users",
    ]
    for table in tables:
        op.execute(f"DROP TABLE IF EXISTS {table} CASCADE")

    for name, _ in reversed(ENUM_TYPES):
        _drop_enum(name)
