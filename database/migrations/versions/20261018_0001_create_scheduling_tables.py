"""create scheduling tables

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


room_type = sa.Enum("lecture", "laboratory", "seminar", "auditorium", "computer_lab", name="room_type")
leave_status = sa.Enum("pending", "approved", "rejected", name="leave_status")
program_level = sa.Enum("ug", "pg", name="program_level")
timetable_status = sa.Enum("draft", "generated", "review", "approved", "published", name="timetable_status")
notification_audience = sa.Enum("admin", "faculty", "student", name="notification_audience")
notification_type = sa.Enum(
    "timetable_generated",
    "timetable_approved",
    "timetable_published",
    name="notification_type",
)
notification_priority = sa.Enum("low", "medium", "high", name="notification_priority")


def upgrade() -> None:
    op.create_table(
        "faculty",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("faculty_code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("department", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("max_hours_per_week", sa.Integer(), nullable=False, server_default="20"),
        sa.Column("availability", sa.JSON(), nullable=False),
        sa.Column("preferred_days", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_faculty_faculty_code", "faculty", ["faculty_code"], unique=True)
    op.create_index("ix_faculty_department", "faculty", ["department"], unique=False)

    op.create_table(
        "faculty_leaves",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("faculty_id", sa.String(length=36), sa.ForeignKey("faculty.id", ondelete="CASCADE"), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("status", leave_status, nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_faculty_leaves_faculty_id", "faculty_leaves", ["faculty_id"], unique=False)

    op.create_table(
        "classrooms",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("room_code", sa.String(length=50), nullable=False),
        sa.Column("building", sa.String(length=200), nullable=False),
        sa.Column("floor", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("room_type", room_type, nullable=False, server_default="lecture"),
        sa.Column("smart_board", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("projector", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("computer_lab", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("air_conditioning", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("wifi", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("specialized_equipment", sa.JSON(), nullable=False),
        sa.Column("wheelchair_accessible", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_classrooms_room_code", "classrooms", ["room_code"], unique=True)

    op.create_table(
        "timeslots",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("slot_code", sa.String(length=50), nullable=False),
        sa.Column("day", sa.String(length=20), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("shift", sa.String(length=20), nullable=False, server_default="morning"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_timeslots_slot_code", "timeslots", ["slot_code"], unique=True)
    op.create_index("ix_timeslots_day_start", "timeslots", ["day", "start_time"], unique=False)

    op.create_table(
        "subjects",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("subject_code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("department", sa.String(length=200), nullable=False),
        sa.Column("program", program_level, nullable=False, server_default="ug"),
        sa.Column("semester", sa.Integer(), nullable=False),
        sa.Column("credits", sa.Integer(), nullable=False, server_default="3"),
        sa.Column("classes_per_week", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("enrollment", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("room_type", room_type, nullable=True),
        sa.Column("min_capacity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("required_equipment", sa.JSON(), nullable=False),
        sa.Column("accessibility_needed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_subjects_subject_code", "subjects", ["subject_code"], unique=True)
    op.create_index("ix_subjects_department", "subjects", ["department"], unique=False)
    op.create_index("ix_subjects_semester", "subjects", ["semester"], unique=False)

    op.create_table(
        "subject_faculty",
        sa.Column("subject_id", sa.String(length=36), sa.ForeignKey("subjects.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("faculty_id", sa.String(length=36), sa.ForeignKey("faculty.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "timetables",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("timetable_code", sa.String(length=120), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("academic_year", sa.String(length=20), nullable=False),
        sa.Column("semester", sa.Integer(), nullable=False),
        sa.Column("department", sa.String(length=200), nullable=True),
        sa.Column("status", timetable_status, nullable=False, server_default="draft"),
        sa.Column("fitness", sa.Float(), nullable=False, server_default="0"),
        sa.Column("generations", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("classroom_utilization", sa.Float(), nullable=False, server_default="0"),
        sa.Column("faculty_workload_balance", sa.Float(), nullable=False, server_default="0"),
        sa.Column("conflict_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("preference_satisfaction", sa.Float(), nullable=False, server_default="0"),
        sa.Column("generated_by", sa.String(length=36), nullable=True),
        sa.Column("approved_by", sa.String(length=36), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_timetables_timetable_code", "timetables", ["timetable_code"], unique=True)
    op.create_index("ix_timetables_status", "timetables", ["status"], unique=False)
    op.create_index("ix_timetables_scope", "timetables", ["academic_year", "semester", "department"], unique=False)

    op.create_table(
        "timetable_entries",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column(
            "timetable_id",
            sa.String(length=36),
            sa.ForeignKey("timetables.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("entry_code", sa.String(length=160), nullable=False, unique=True),
        sa.Column("faculty_id", sa.String(length=36), sa.ForeignKey("faculty.id"), nullable=False),
        sa.Column("subject_id", sa.String(length=36), sa.ForeignKey("subjects.id"), nullable=False),
        sa.Column("classroom_id", sa.String(length=36), sa.ForeignKey("classrooms.id"), nullable=False),
        sa.Column("timeslot_id", sa.String(length=36), sa.ForeignKey("timeslots.id"), nullable=False),
        sa.Column("semester", sa.Integer(), nullable=False),
        sa.Column("department", sa.String(length=200), nullable=False),
        sa.Column("program", program_level, nullable=False),
    )
    op.create_index("ix_timetable_entries_timetable_id", "timetable_entries", ["timetable_id"], unique=False)

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("audience", notification_audience, nullable=False),
        sa.Column("department", sa.String(length=200), nullable=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("notification_type", notification_type, nullable=False),
        sa.Column("priority", notification_priority, nullable=False, server_default="medium"),
        sa.Column("related_timetable_id", sa.String(length=36), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_notifications_audience", "notifications", ["audience"], unique=False)
    op.create_index("ix_notifications_department", "notifications", ["department"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_notifications_department", table_name="notifications")
    op.drop_index("ix_notifications_audience", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("ix_timetable_entries_timetable_id", table_name="timetable_entries")
    op.drop_table("timetable_entries")
    op.drop_index("ix_timetables_scope", table_name="timetables")
    op.drop_index("ix_timetables_status", table_name="timetables")
    op.drop_index("ix_timetables_timetable_code", table_name="timetables")
    op.drop_table("timetables")
    op.drop_table("subject_faculty")
    op.drop_index("ix_subjects_semester", table_name="subjects")
    op.drop_index("ix_subjects_department", table_name="subjects")
    op.drop_index("ix_subjects_subject_code", table_name="subjects")
    op.drop_table("subjects")
    op.drop_index("ix_timeslots_day_start", table_name="timeslots")
    op.drop_index("ix_timeslots_slot_code", table_name="timeslots")
    op.drop_table("timeslots")
    op.drop_index("ix_classrooms_room_code", table_name="classrooms")
    op.drop_table("classrooms")
    op.drop_index("ix_faculty_leaves_faculty_id", table_name="faculty_leaves")
    op.drop_table("faculty_leaves")
    op.drop_index("ix_faculty_department", table_name="faculty")
    op.drop_index("ix_faculty_faculty_code", table_name="faculty")
    op.drop_table("faculty")
    bind = op.get_bind()
    for enum_type in (
        notification_priority,
        notification_type,
        notification_audience,
        timetable_status,
        program_level,
        leave_status,
        room_type,
    ):
        enum_type.drop(bind, checkfirst=True)
