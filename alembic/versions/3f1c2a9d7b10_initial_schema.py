"""Initial schema: users, achievements, reports, photos, comments

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f1c2a9d7b10'
down_revision = None
branch_labels = None
depends_on = None

CATEGORIES = (
    'TRASH', 'POLLUTION', 'DEFORESTATION', 'WATER_POLLUTION', 'AIR_POLLUTION',
    'WILDLIFE', 'NOISE', 'SOIL', 'ANIMAL', 'OTHER',
)
STATUSES = ('PENDING', 'IN_PROGRESS', 'RESOLVED', 'VERIFIED', 'REJECTED', 'DUPLICATE')


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('location', sa.String(length=150), nullable=True),
        sa.Column('eco_points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('reports_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('email_verified', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(), nullable=True),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'achievements',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('code', sa.String(length=50), nullable=False),
        sa.Column('title', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('icon', sa.String(length=16), nullable=True),
        sa.Column('category', sa.String(length=30), nullable=True),
        sa.Column('points_reward', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('unlocked_at', sa.TIMESTAMP(), nullable=False),
        sa.UniqueConstraint('user_id', 'code', name='uq_achievements_user_code'),
    )
    op.create_index('ix_achievements_id', 'achievements', ['id'])
    op.create_index('ix_achievements_user_id', 'achievements', ['user_id'])

    op.create_table(
        'reports',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('category', sa.Enum(*CATEGORIES, name='reportcategory'), nullable=False),
        sa.Column('title', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('status', sa.Enum(*STATUSES, name='reportstatus'), nullable=False),
        sa.Column('eco_points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('priority', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('verification_notes', sa.Text(), nullable=True),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        sa.Column('resolved_at', sa.TIMESTAMP(), nullable=True),
        sa.Column('verified_at', sa.TIMESTAMP(), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('anonymous', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            'duplicate_of_id',
            sa.Integer(),
            sa.ForeignKey('reports.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('points_credited', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('version_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(), nullable=True),
    )
    for column in ('id', 'user_id', 'category', 'latitude', 'longitude', 'status', 'created_at'):
        op.create_index(f'ix_reports_{column}', 'reports', [column])

    op.create_table(
        'report_photos',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('report_id', sa.Integer(), sa.ForeignKey('reports.id'), nullable=False),
        sa.Column('filename', sa.String(length=255), nullable=False),
        sa.Column('original_filename', sa.String(length=255), nullable=False),
        sa.Column('file_url', sa.String(length=512), nullable=False),
        sa.Column('file_size', sa.BigInteger(), nullable=True),
        sa.Column('content_type', sa.String(length=100), nullable=True),
        sa.Column('is_primary', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(), nullable=False),
    )
    op.create_index('ix_report_photos_id', 'report_photos', ['id'])
    op.create_index('ix_report_photos_report_id', 'report_photos', ['report_id'])

    op.create_table(
        'report_comments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('report_id', sa.Integer(), sa.ForeignKey('reports.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('is_admin_comment', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.TIMESTAMP(), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(), nullable=True),
    )
    op.create_index('ix_report_comments_id', 'report_comments', ['id'])
    op.create_index('ix_report_comments_report_id', 'report_comments', ['report_id'])
    op.create_index('ix_report_comments_user_id', 'report_comments', ['user_id'])


def downgrade():
    op.drop_table('report_comments')
    op.drop_table('report_photos')
    op.drop_table('reports')
    op.drop_table('achievements')
    op.drop_table('users')
    sa.Enum(name='reportstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='reportcategory').drop(op.get_bind(), checkfirst=True)
