import unittest
from grocery.domain.Recipe import Recipe
from grocery.logic.recipes.ingredients import (
    classify_ingredients, format_ingredient_lines, render_ingredient_groups
)


class TestClassifyIngredients(unittest.TestCase):

    def test_pepperoni_is_harder(self):
        simple, harder = classify_ingredients("Pepperoni, Lettuce")
        self.assertEqual(simple, ["Lettuce"])
        self.assertEqual(harder, ["Pepperoni"])
        self.assertEqual(render_ingredient_groups(simple, harder),
                         "Simple ingredients:\n• Lettuce\n\nHarder to find ingredients:\n• Pepperoni")

    def test_match_is_case_insensitive_substring(self):
        simple, harder = classify_ingredients("Red Miso Paste,SAFFRON threads, eggs")
        self.assertEqual(harder, ["Red Miso Paste", "SAFFRON threads"])
        self.assertEqual(simple, ["eggs"])

    def test_empty_tokens_are_dropped(self):
        self.assertEqual(classify_ingredients(" , Salt,, ,Water "), (["Salt", "Water"], []))

    def test_empty_input_renders_nothing(self):
        simple, harder = classify_ingredients("")
        self.assertEqual((simple, harder), ([], []))
        self.assertEqual(render_ingredient_groups(simple, harder), "")

    def test_single_group_has_no_blank_line(self):
        self.assertEqual(render_ingredient_groups(["Salt", "Flour"], []),
                         "Simple ingredients:\n• Salt\n• Flour")

    def test_custom_reference_set(self):
        self.assertEqual(classify_ingredients("Kale, Rice", reference={"kale"}), (["Rice"], ["Kale"]))


class TestRecipeIngredients(unittest.TestCase):

    def meal(self):
        meal = {
            "idMeal": "52772",
            "strMeal": "Teriyaki Chicken Casserole",
            "strInstructions": "Preheat oven.\r\nBake.",
            "strMealThumb": "https://www.themealdb.com/images/media/meals/wvpsxx1468256321.jpg",
            "strCategory": "Chicken",
            "strArea": "Japanese",
        }
        for n in range(1, 21):
            meal[f"strIngredient{n}"] = ""
            meal[f"strMeasure{n}"] = ""
        meal.update({
            "strIngredient1": "soy sauce", "strMeasure1": "3/4 cup",
            "strIngredient2": " water ", "strMeasure2": " 1/2 cup ",
            "strIngredient3": None, "strMeasure3": None,
            "strIngredient4": "Salt", "strMeasure4": None,
        })
        return meal

    def test_from_api(self):
        recipe = Recipe.from_api(self.meal())
        self.assertEqual(recipe.id, "52772")
        self.assertEqual(recipe.instructions, "Preheat oven.\nBake.")
        self.assertEqual(recipe.ingredient_pairs(),
                         [("soy sauce", "3/4 cup"), ("water", "1/2 cup"), ("Salt", "")])
        self.assertEqual(recipe.ingredient_names(), "soy sauce, water, Salt")

    def test_bullet_lines(self):
        recipe = Recipe.from_api(self.meal())
        self.assertEqual(format_ingredient_lines(recipe),
                         "• soy sauce (3/4 cup)\n• water (1/2 cup)\n• Salt")


if __name__ == '__main__':
    unittest.main()
