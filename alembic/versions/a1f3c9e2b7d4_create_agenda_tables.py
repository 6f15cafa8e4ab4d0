"""create agenda tables

Revision ID: a1f3c9e2b7d4
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "a1f3c9e2b7d4"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

userrole = sa.Enum("ADMINISTRADOR", "TERAPEUTA", "ALUMNO", "PACIENTE", name="userrole")
tipoespacio = sa.Enum("CUBICULO", "CONSULTORIO", "SALA", name="tipoespacio")
estadocita = sa.Enum("AGENDADO", "COMPLETADO", "CANCELADO", "NO_ASISTIO", name="estadocita")
modalidad = sa.Enum("PRESENCIAL", "ONLINE", name="modalidad")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", userrole, nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "espacios",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("nombre", sa.String(100), nullable=False, unique=True),
        sa.Column("tipo", tipoespacio, nullable=False),
        sa.Column("descripcion", sa.Text, nullable=True),
        sa.Column("capacidad", sa.Integer, nullable=False, server_default="1"),
        sa.Column("costo_por_hora", sa.Numeric(10, 2), nullable=False, server_default="0.00"),
        sa.Column("esta_activo", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_espacios_esta_activo", "espacios", ["esta_activo"])

    op.create_table(
        "citas",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("espacio_id", sa.Integer, sa.ForeignKey("espacios.id"), nullable=False),
        sa.Column("paciente_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("terapeuta_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("fecha", sa.Date, nullable=False),
        sa.Column("hora_inicio", sa.Time, nullable=False),
        sa.Column("hora_fin", sa.Time, nullable=False),
        sa.Column("estado", estadocita, nullable=False),
        sa.Column("modalidad", modalidad, nullable=False),
        sa.Column("materia", sa.String(150), nullable=False),
        sa.Column("notas", sa.Text, nullable=True),
        sa.Column("created_by", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("idx_cita_espacio_fecha", "citas", ["espacio_id", "fecha"])
    op.create_index("idx_cita_terapeuta_fecha", "citas", ["terapeuta_id", "fecha"])
    op.create_index("idx_cita_paciente_fecha", "citas", ["paciente_id", "fecha"])

    op.create_table(
        "configuracion_horarios",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("espacio_id", sa.Integer, sa.ForeignKey("espacios.id"), nullable=False),
        sa.Column("fecha", sa.Date, nullable=False),
        sa.Column("hora_inicio", sa.SmallInteger, nullable=True),
        sa.Column("hora_fin", sa.SmallInteger, nullable=True),
        sa.Column(
            "horas_deshabilitadas",
            sa.JSON,
            nullable=False,
            comment="Etiquetas HH:mm deshabilitadas para ese día",
        ),
        sa.Column("motivo", sa.String(200), nullable=True),
        sa.Column("created_by", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint("espacio_id", "fecha", name="uq_config_espacio_fecha"),
    )

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("entity", sa.String(50), nullable=False),
        sa.Column("entity_id", sa.String(36), nullable=False),
        sa.Column("action", sa.String(20), nullable=False),
        sa.Column("old_data", sa.JSON, nullable=True),
        sa.Column("new_data", sa.JSON, nullable=True),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("user_agent", sa.Text, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_audit_log_user_id", "audit_log", ["user_id"])
    op.create_index("ix_audit_log_entity", "audit_log", ["entity"])
    op.create_index("ix_audit_log_action", "audit_log", ["action"])


def downgrade() -> None:
    op.drop_table("audit_log")
    op.drop_table("configuracion_horarios")
    op.drop_index("idx_cita_paciente_fecha", table_name="citas")
    op.drop_index("idx_cita_terapeuta_fecha", table_name="citas")
    op.drop_index("idx_cita_espacio_fecha", table_name="citas")
    op.drop_table("citas")
    op.drop_table("espacios")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (modalidad, estadocita, tipoespacio, userrole):
        enum_type.drop(bind, checkfirst=True)
