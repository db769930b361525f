"""
Script to add comment query indexes to the database

Run this after database initialization to optimize review page loads.
This is idempotent - safe to run multiple times.
"""
from podsee import create_app, db
from sqlalchemy import text


def add_performance_indexes():
    """Add indexes for the review listing and reply queries"""
    app = create_app()

    with app.app_context():
        try:
            print("\n" + "="*60)
            print("Adding Performance Indexes")
            print("="*60 + "\n")

            indexes = [
                ("idx_comments_centre_top_level", "comments", "(centre_id, parent_comment_id, hidden, created_at DESC)"),
                ("idx_comments_centre_context", "comments", "(centre_id, level, subject, created_at DESC)"),
                ("idx_comments_parent_created", "comments", "(parent_comment_id, hidden, created_at)"),
            ]

            for idx_name, table_name, columns in indexes:
                try:
                    db.session.execute(text(f"""
                        CREATE INDEX IF NOT EXISTS {idx_name}
                        ON {table_name} {columns}
                    """))
                    db.session.commit()  # Commit each index individually
                    print(f"   {idx_name} created on {table_name}")
                except Exception as e:
                    db.session.rollback()
                    print(f"   {idx_name}: {str(e)}")

            print("\n" + "="*60)
            print("Performance indexes added successfully!")
            print("="*60 + "\n")

        except Exception as e:
            print(f"\nError adding indexes: {str(e)}")
            db.session.rollback()
            raise


if __name__ == '__main__':
    add_performance_indexes()
