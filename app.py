import os

from expense_tracker import create_app
from expense_tracker.models import db

app = create_app()

if __name__ == "__main__":
    # Create DB if not exists
    with app.app_context():
        db.create_all()
    app.run(debug=os.getenv("FLASK_DEBUG") == "1")
