# menuplanner/models/menu_recipe.py
from menuplanner.extensions import db


class MenuRecipe(db.Model):
    __tablename__ = 'menu_recipe'

    menu_id = db.Column(db.Integer, db.ForeignKey('menus.id'), primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipes.id'), primary_key=True, index=True)

    def to_dict(self):
        return {"menu_id": self.menu_id, "recipe_id": self.recipe_id}
