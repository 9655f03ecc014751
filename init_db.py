"""
Initialize database and create tables
Run this script once to set up your database (same as `flask setup-db`)
"""

from app import create_app
from services.setup_service import setup_ledger

def init_db():
    """Initialize the database"""
    app = create_app('development')
    
    with app.app_context():
        print("Creating database tables...")
        result = setup_ledger()
        print("✓ Database tables created successfully!")
        print(f"Database location: {app.config['SQLALCHEMY_DATABASE_URI']}")
        
        # Print all tables
        print("\nTables created:")
        for table in result['tables']:
            print(f"  - {table}")
        print(f"\nHome supplier: {result['home_supplier']}")

if __name__ == '__main__':
    init_db()
