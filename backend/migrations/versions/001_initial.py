"""Initial migration - create all tables

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

Creates the grading schema:
- users: directory entries referenced by results
- assessments / questions / options: the assessment catalog
- results: one row per graded attempt
- student_answers: the answers recorded for each attempt
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── Users Table ───────────────────────────────────────────
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('email', sa.Text(), nullable=True),
        sa.Column('role', sa.String(32), nullable=False, server_default='Student'),
        sa.Column('created_at', sa.DateTime(timezone=True),
                  server_default=sa.func.now(), nullable=True),
    )

    # ── Catalog Tables ────────────────────────────────────────
    op.create_table(
        'assessments',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('course_id', sa.String(36), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('max_score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True),
                  server_default=sa.func.now(), nullable=True),
    )
    op.create_index('ix_assessments_course_id', 'assessments', ['course_id'])

    op.create_table(
        'questions',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('assessment_id', sa.String(36),
                  sa.ForeignKey('assessments.id', ondelete='CASCADE'), nullable=False),
        sa.Column('question_text', sa.Text(), nullable=False),
    )
    op.create_index('ix_questions_assessment_id', 'questions', ['assessment_id'])

    op.create_table(
        'options',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('question_id', sa.String(36),
                  sa.ForeignKey('questions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('is_correct', sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index('ix_options_question_id', 'options', ['question_id'])

    # ── Results Table ─────────────────────────────────────────
    # No unique (user_id, assessment_id): every submission is its own attempt
    op.create_table(
        'results',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('assessment_id', sa.String(36),
                  sa.ForeignKey('assessments.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('attempt_date', sa.DateTime(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
    )
    op.create_index('ix_results_assessment_id', 'results', ['assessment_id'])
    op.create_index('ix_results_user_id', 'results', ['user_id'])
    op.create_index('ix_results_attempt_date', 'results', ['attempt_date'])

    # ── Student Answers Table ─────────────────────────────────
    # question_id / selected_option_id are not foreign keys so that
    # catalog edits never invalidate recorded answers
    op.create_table(
        'student_answers',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('result_id', sa.String(36),
                  sa.ForeignKey('results.id', ondelete='CASCADE'), nullable=False),
        sa.Column('question_id', sa.String(36), nullable=False),
        sa.Column('selected_option_id', sa.String(36), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_student_answers_result_id', 'student_answers', ['result_id'])


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_index('ix_student_answers_result_id', table_name='student_answers')
    op.drop_table('student_answers')
    op.drop_index('ix_results_attempt_date', table_name='results')
    op.drop_index('ix_results_user_id', table_name='results')
    op.drop_index('ix_results_assessment_id', table_name='results')
    op.drop_table('results')
    op.drop_index('ix_options_question_id', table_name='options')
    op.drop_table('options')
    op.drop_index('ix_questions_assessment_id', table_name='questions')
    op.drop_table('questions')
    op.drop_index('ix_assessments_course_id', table_name='assessments')
    op.drop_table('assessments')
    op.drop_table('users')
