"""recommendation_engine

Revision ID: 0001
Revises:
Create Date: 2026-10-17

Adds:
- users and sessions tables for cookie auth
- experiments table with measured sensory scores and target profile
- effect_mappings and effect_mapping_effects tables (the catalog)
- experiment_mapping_dismissals table (one row per experiment, mapping, user)

Note: After running this migration, create a user and give them the default catalog:
    python -m brewlog.cli create-user --email your@email.com
    python -m brewlog.cli seed-mappings --email your@email.com
"""
from alembic import op
import sqlalchemy as sa

revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

# Enum columns store member names, matching sa.Enum(<python enum>) on the models
input_variable = sa.Enum(
    'TEMPERATURE', 'RATIO', 'GRIND_SIZE', 'BLOOM_TIME', 'TOTAL_BREW_TIME',
    'COFFEE_WEIGHT', 'POUR_COUNT', 'POUR_TECHNIQUE', 'FILTER_TYPE',
    name='inputvariable',
)
mapping_direction = sa.Enum('INCREASE', 'DECREASE', name='mappingdirection')
output_variable = sa.Enum(
    'ACIDITY', 'SWEETNESS', 'BITTERNESS', 'BODY', 'AROMA', 'AFTERTASTE', 'OVERALL',
    name='outputvariable',
)
effect_direction = sa.Enum('INCREASE', 'DECREASE', 'NONE', name='effectdirection')
confidence = sa.Enum('LOW', 'MEDIUM', 'HIGH', name='confidence')


def upgrade() -> None:
    # Users and sessions
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=True),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table(
        'sessions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('token', sa.String(64), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('user_agent', sa.String(512), nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_sessions_token'), 'sessions', ['token'], unique=True)

    # Experiments
    op.create_table(
        'experiments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('brew_date', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('overall_notes', sa.Text(), nullable=False),
        sa.Column('overall_score', sa.Integer(), nullable=True),
        sa.Column('coffee_weight', sa.Float(), nullable=True),
        sa.Column('water_weight', sa.Float(), nullable=True),
        sa.Column('ratio', sa.Float(), nullable=True),
        sa.Column('grind_size', sa.String(100), nullable=True),
        sa.Column('water_temperature', sa.Float(), nullable=True),
        sa.Column('bloom_water', sa.Float(), nullable=True),
        sa.Column('bloom_time', sa.Integer(), nullable=True),
        sa.Column('total_brew_time', sa.Integer(), nullable=True),
        sa.Column('technique_notes', sa.Text(), nullable=True),
        sa.Column('acidity_intensity', sa.Integer(), nullable=True),
        sa.Column('sweetness_intensity', sa.Integer(), nullable=True),
        sa.Column('bitterness_intensity', sa.Integer(), nullable=True),
        sa.Column('body_weight', sa.Integer(), nullable=True),
        sa.Column('aroma_intensity', sa.Integer(), nullable=True),
        sa.Column('target_acidity', sa.Integer(), nullable=True),
        sa.Column('target_sweetness', sa.Integer(), nullable=True),
        sa.Column('target_bitterness', sa.Integer(), nullable=True),
        sa.Column('target_body', sa.Integer(), nullable=True),
        sa.Column('target_aroma', sa.Integer(), nullable=True),
        sa.Column('improvement_notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_experiments_user_id', 'experiments', ['user_id'])
    op.create_index('idx_experiments_user_brew_date', 'experiments', ['user_id', 'brew_date'])

    # Effect mapping catalog
    op.create_table(
        'effect_mappings',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('variable', input_variable, nullable=False),
        sa.Column('direction', mapping_direction, nullable=False),
        sa.Column('tick_description', sa.String(100), nullable=False),
        sa.Column('source', sa.String(255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_effect_mappings_user_id', 'effect_mappings', ['user_id'])
    op.create_index('idx_effect_mappings_user_active', 'effect_mappings', ['user_id', 'active'])

    op.create_table(
        'effect_mapping_effects',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('mapping_id', sa.Uuid(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('output_variable', output_variable, nullable=False),
        sa.Column('direction', effect_direction, nullable=False),
        sa.Column('range_min', sa.Numeric(4, 1), nullable=True),
        sa.Column('range_max', sa.Numeric(4, 1), nullable=True),
        sa.Column('confidence', confidence, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['mapping_id'], ['effect_mappings.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_effect_mapping_effects_mapping_id', 'effect_mapping_effects', ['mapping_id'])

    # Dismissals
    op.create_table(
        'experiment_mapping_dismissals',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('experiment_id', sa.Uuid(), nullable=False),
        sa.Column('mapping_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('dismissed_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['experiment_id'], ['experiments.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['mapping_id'], ['effect_mappings.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'experiment_id', 'mapping_id', 'user_id', name='uq_experiment_mapping_dismissal'
        ),
    )
    op.create_index(
        'idx_dismissals_experiment_user',
        'experiment_mapping_dismissals',
        ['experiment_id', 'user_id'],
    )


def downgrade() -> None:
    op.drop_index('idx_dismissals_experiment_user', table_name='experiment_mapping_dismissals')
    op.drop_table('experiment_mapping_dismissals')

    op.drop_index('idx_effect_mapping_effects_mapping_id', table_name='effect_mapping_effects')
    op.drop_table('effect_mapping_effects')

    op.drop_index('idx_effect_mappings_user_active', table_name='effect_mappings')
    op.drop_index('idx_effect_mappings_user_id', table_name='effect_mappings')
    op.drop_table('effect_mappings')

    op.drop_index('idx_experiments_user_brew_date', table_name='experiments')
    op.drop_index('idx_experiments_user_id', table_name='experiments')
    op.drop_table('experiments')

    op.drop_index(op.f('ix_sessions_token'), table_name='sessions')
    op.drop_table('sessions')
    op.drop_table('users')

    # Enum types are created implicitly with their tables on PostgreSQL
    bind = op.get_bind()
    for enum_type in (confidence, effect_direction, output_variable, mapping_direction, input_variable):
        enum_type.drop(bind, checkfirst=True)
