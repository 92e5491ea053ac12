"""Create BookVerse tables

Revision ID: 4f2a9c1d7e3b
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '4f2a9c1d7e3b'
down_revision = None
branch_labels = None
depends_on = None

NOW = sa.text('CURRENT_TIMESTAMP')


def _user_book_columns():
    return [
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('book_id', sa.Integer(), nullable=False),
    ]


def _user_book_constraints(name):
    return [
        sa.ForeignKeyConstraint(['book_id'], ['books.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'book_id', name=name),
    ]


def _user_book_indexes(table):
    op.create_index(op.f(f'ix_{table}_id'), table, ['id'], unique=False)
    op.create_index(op.f(f'ix_{table}_user_id'), table, ['user_id'], unique=False)
    op.create_index(op.f(f'ix_{table}_book_id'), table, ['book_id'], unique=False)


def upgrade() -> None:
    # Create users table
    op.create_table('users',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('email', sa.String(), nullable=False),
    sa.Column('hashed_password', sa.String(), nullable=False),
    sa.Column('name', sa.String(), nullable=False),
    sa.Column('avatar_url', sa.String(), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
    sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)

    # Create books table
    op.create_table('books',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('title', sa.String(), nullable=False),
    sa.Column('author', sa.String(), nullable=False),
    sa.Column('description', sa.Text(), nullable=False),
    sa.Column('genre', sa.String(), nullable=False),
    sa.Column('language', sa.String(), nullable=False),
    sa.Column('content', sa.Text(), nullable=False),
    sa.Column('cover_image', sa.String(), nullable=True),
    sa.Column('page_count', sa.Integer(), nullable=False),
    sa.Column('is_public', sa.Boolean(), nullable=False),
    sa.Column('uploaded_by', sa.Integer(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
    sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    sa.ForeignKeyConstraint(['uploaded_by'], ['users.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    for column in ('id', 'title', 'author', 'genre', 'language', 'is_public', 'uploaded_by', 'created_at'):
        op.create_index(op.f(f'ix_books_{column}'), 'books', [column], unique=False)

    # Create chapters table
    op.create_table('chapters',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('title', sa.String(), nullable=False),
    sa.Column('start_page', sa.Integer(), nullable=True),
    sa.Column('end_page', sa.Integer(), nullable=True),
    sa.Column('order', sa.Integer(), nullable=False),
    sa.Column('book_id', sa.Integer(), nullable=False),
    sa.ForeignKeyConstraint(['book_id'], ['books.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_chapters_id'), 'chapters', ['id'], unique=False)
    op.create_index(op.f('ix_chapters_book_id'), 'chapters', ['book_id'], unique=False)

    # Create subchapters table
    op.create_table('subchapters',
    sa.Column('id', sa.Integer(), nullable=False),
    sa.Column('title', sa.String(), nullable=False),
    sa.Column('page', sa.Integer(), nullable=True),
    sa.Column('order', sa.Integer(), nullable=False),
    sa.Column('chapter_id', sa.Integer(), nullable=False),
    sa.ForeignKeyConstraint(['chapter_id'], ['chapters.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_subchapters_id'), 'subchapters', ['id'], unique=False)
    op.create_index(op.f('ix_subchapters_chapter_id'), 'subchapters', ['chapter_id'], unique=False)

    # Create reviews table
    op.create_table('reviews',
    *_user_book_columns(),
    sa.Column('rating', sa.Integer(), nullable=False),
    sa.Column('comment', sa.Text(), nullable=False),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
    sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    sa.CheckConstraint('rating >= 1 AND rating <= 5', name='review_rating_range'),
    *_user_book_constraints('unique_user_book_review')
    )
    _user_book_indexes('reviews')

    # Create library_items table
    op.create_table('library_items',
    *_user_book_columns(),
    sa.Column('added_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
    *_user_book_constraints('unique_user_book_library_item')
    )
    _user_book_indexes('library_items')

    # Create bookmarks table
    op.create_table('bookmarks',
    *_user_book_columns(),
    sa.Column('page', sa.Integer(), nullable=True),
    sa.Column('note', sa.Text(), nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
    sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    *_user_book_constraints('unique_user_book_bookmark')
    )
    _user_book_indexes('bookmarks')

    # Create reading_progress table
    op.create_table('reading_progress',
    *_user_book_columns(),
    sa.Column('current_page', sa.Integer(), nullable=False),
    sa.Column('total_pages', sa.Integer(), nullable=False),
    sa.Column('progress_percent', sa.Float(), nullable=False),
    sa.Column('last_read_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
    sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    *_user_book_constraints('unique_user_book_progress')
    )
    _user_book_indexes('reading_progress')

    # Create recently_read table
    op.create_table('recently_read',
    *_user_book_columns(),
    sa.Column('read_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
    sa.Column('created_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
    sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    *_user_book_constraints('unique_user_book_recently_read')
    )
    _user_book_indexes('recently_read')
    op.create_index(op.f('ix_recently_read_read_at'), 'recently_read', ['read_at'], unique=False)

    # Create downloads table
    op.create_table('downloads',
    *_user_book_columns(),
    sa.Column('downloaded_at', sa.DateTime(timezone=True), server_default=NOW, nullable=True),
    *_user_book_constraints('unique_user_book_download')
    )
    _user_book_indexes('downloads')


def downgrade() -> None:
    for table in (
        'downloads',
        'recently_read',
        'reading_progress',
        'bookmarks',
        'library_items',
        'reviews',
        'subchapters',
        'chapters',
        'books',
        'users',
    ):
        op.drop_table(table)
