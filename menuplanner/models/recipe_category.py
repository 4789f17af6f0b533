# menuplanner/models/recipe_category.py
from menuplanner.extensions import db

class RecipeCategory(db.Model):
    __tablename__ = 'category_recipe'

    recipe_id = db.Column(db.Integer, db.ForeignKey('recipes.id'), primary_key=True)
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id'), primary_key=True, index=True)

    def to_dict(self):
        return {"recipe_id": self.recipe_id, "category_id": self.category_id}
