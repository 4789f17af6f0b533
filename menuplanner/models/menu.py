# menuplanner/models/menu.py
from menuplanner.extensions import db


class Menu(db.Model):
    """A day's plan. Recipes are attached through ``menu_recipe``."""
    __tablename__ = 'menus'

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, nullable=False, index=True)
    comment = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=db.func.current_timestamp())
    updated_at = db.Column(db.DateTime, nullable=False, default=db.func.current_timestamp(), onupdate=db.func.current_timestamp())

    def to_dict(self):
        return {
            'id': self.id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            'date': self.date.isoformat() if self.date else None,
            'comment': self.comment,
        }
