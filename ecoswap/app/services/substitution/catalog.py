"""Non-vegan ingredients and their plant-based replacements.

Declaration order matters: when a line contains several keys, the key declared
first wins. Compound keys ("sour cream", "chicken broth") therefore precede the
single words they contain, and "eggs" precedes "egg".
"""

from enum import Enum
from typing import Dict, FrozenSet, List, Tuple

from pydantic import BaseModel, ConfigDict


class IngredientCategory(str, Enum):
    DAIRY = "dairy"
    EGGS = "eggs"
    MEAT = "meat"
    SEAFOOD = "seafood"
    OTHER = "other"


class CatalogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    alternatives: Tuple[str, ...]
    default_alternative: str
    ratio: str
    notes: str
    category: IngredientCategory


def _entry(key, alternatives, default, ratio, notes, category) -> CatalogEntry:
    return CatalogEntry(
        key=key,
        alternatives=tuple(alternatives),
        default_alternative=default,
        ratio=ratio,
        notes=notes,
        category=category,
    )


DAIRY = IngredientCategory.DAIRY
EGGS = IngredientCategory.EGGS
MEAT = IngredientCategory.MEAT
SEAFOOD = IngredientCategory.SEAFOOD
OTHER = IngredientCategory.OTHER

_ENTRIES: List[CatalogEntry] = [
    # Dairy
    _entry(
        "buttermilk",
        ["soy milk with lemon juice", "oat milk with vinegar"],
        "soy milk with lemon juice",
        "1:1",
        "Stir 1 tbsp lemon juice or vinegar into each cup and let it sit 5 minutes",
        DAIRY,
    ),
    _entry(
        "sour cream",
        ["cashew sour cream", "coconut sour cream"],
        "cashew sour cream",
        "1:1",
        "Blend cashews with lemon juice for a homemade version",
        DAIRY,
    ),
    _entry(
        "cream cheese",
        ["vegan cream cheese", "cashew cream cheese"],
        "vegan cream cheese",
        "1:1",
        "Cashew cream cheese works well in frostings and dips",
        DAIRY,
    ),
    _entry(
        "heavy cream",
        ["coconut cream", "cashew cream"],
        "coconut cream",
        "1:1",
        "Chill canned coconut cream overnight if it needs to whip",
        DAIRY,
    ),
    _entry(
        "ice cream",
        ["vegan ice cream", "coconut ice cream"],
        "vegan ice cream",
        "1:1",
        "Look for oat or coconut based brands",
        DAIRY,
    ),
    _entry(
        "milk",
        ["oat milk", "almond milk", "soy milk", "coconut milk"],
        "oat milk",
        "1:1",
        "Oat milk works best for creamy textures, almond for lighter dishes",
        DAIRY,
    ),
    _entry(
        "butter",
        ["vegan butter", "coconut oil", "olive oil"],
        "vegan butter",
        "1:1",
        "Use coconut oil for baking, olive oil for savory dishes",
        DAIRY,
    ),
    _entry(
        "cream",
        ["coconut cream", "cashew cream", "oat cream"],
        "coconut cream",
        "1:1",
        "Coconut cream for desserts, cashew cream for savory dishes",
        DAIRY,
    ),
    _entry(
        "parmesan",
        ["vegan parmesan", "nutritional yeast"],
        "vegan parmesan",
        "1:1",
        "Blend cashews, nutritional yeast and salt for a quick version",
        DAIRY,
    ),
    _entry(
        "mozzarella",
        ["vegan mozzarella", "cashew mozzarella"],
        "vegan mozzarella",
        "1:1",
        "Choose a brand labelled for melting on pizza",
        DAIRY,
    ),
    _entry(
        "cheese",
        ["vegan cheese", "nutritional yeast", "cashew cheese"],
        "vegan cheese",
        "1:1",
        "Nutritional yeast for cheesy flavor, vegan cheese for melting",
        DAIRY,
    ),
    _entry(
        "yogurt",
        ["coconut yogurt", "almond yogurt", "soy yogurt"],
        "coconut yogurt",
        "1:1",
        "Coconut yogurt for thickness, soy yogurt for protein",
        DAIRY,
    ),
    _entry(
        "ghee",
        ["coconut oil", "vegan butter"],
        "coconut oil",
        "1:1",
        "Refined coconut oil has the most neutral flavor",
        DAIRY,
    ),
    # Eggs
    _entry(
        "mayonnaise",
        ["vegan mayonnaise", "aquafaba mayonnaise"],
        "vegan mayonnaise",
        "1:1",
        "Aquafaba whipped with oil and mustard makes a homemade version",
        EGGS,
    ),
    _entry(
        "eggs",
        ["flax eggs", "chia eggs", "aquafaba", "applesauce"],
        "flax eggs",
        "1 egg = 1 tbsp ground flax + 3 tbsp water",
        "Flax eggs for binding, aquafaba for whipping, applesauce for moisture",
        EGGS,
    ),
    _entry(
        "egg",
        ["flax egg", "chia egg", "aquafaba", "applesauce"],
        "flax egg",
        "1 egg = 1 tbsp ground flax + 3 tbsp water",
        "Flax eggs for binding, aquafaba for whipping, applesauce for moisture",
        EGGS,
    ),
    # Meat
    _entry(
        "chicken broth",
        ["vegetable broth", "mushroom broth"],
        "vegetable broth",
        "1:1",
        "Add a splash of soy sauce for extra savoriness",
        MEAT,
    ),
    _entry(
        "chicken stock",
        ["vegetable stock", "mushroom stock"],
        "vegetable stock",
        "1:1",
        "Add a splash of soy sauce for extra savoriness",
        MEAT,
    ),
    _entry(
        "beef broth",
        ["mushroom broth", "vegetable broth"],
        "mushroom broth",
        "1:1",
        "Simmer dried mushrooms with soy sauce for depth",
        MEAT,
    ),
    _entry(
        "beef stock",
        ["mushroom stock", "vegetable stock"],
        "mushroom stock",
        "1:1",
        "Simmer dried mushrooms with soy sauce for depth",
        MEAT,
    ),
    _entry(
        "bacon",
        ["tempeh bacon", "coconut bacon", "smoked tofu"],
        "tempeh bacon",
        "1:1 by weight",
        "Marinate in soy sauce, maple syrup and liquid smoke",
        MEAT,
    ),
    _entry(
        "sausage",
        ["plant-based sausage", "seasoned tempeh"],
        "plant-based sausage",
        "1:1 by weight",
        "Crumble seasoned tempeh with fennel and sage for breakfast sausage",
        MEAT,
    ),
    _entry(
        "pepperoni",
        ["vegan pepperoni", "smoked seitan"],
        "vegan pepperoni",
        "1:1",
        "Thinly sliced seasoned seitan crisps well in the oven",
        MEAT,
    ),
    _entry(
        "beef",
        ["mushrooms", "lentils", "seitan", "plant-based ground"],
        "mushrooms",
        "1:1 by volume",
        "Finely chopped mushrooms or lentils give a similar texture when browned",
        MEAT,
    ),
    _entry(
        "pork",
        ["jackfruit", "seitan", "tempeh"],
        "jackfruit",
        "1:1 by weight",
        "Young green jackfruit shreds like pulled pork",
        MEAT,
    ),
    _entry(
        "lamb",
        ["seitan", "lentils", "eggplant"],
        "seitan",
        "1:1 by weight",
        "Season generously with rosemary and garlic",
        MEAT,
    ),
    _entry(
        "chicken",
        ["tofu", "seitan", "chickpeas", "jackfruit"],
        "tofu",
        "1:1 by weight",
        "Press extra-firm tofu before cooking for a firmer bite",
        MEAT,
    ),
    _entry(
        "turkey",
        ["seitan", "tofu", "tempeh"],
        "seitan",
        "1:1 by weight",
        "Use poultry seasoning for a familiar flavor",
        MEAT,
    ),
    # Seafood
    _entry(
        "fish sauce",
        ["soy sauce", "seaweed sauce", "vegan fish sauce"],
        "soy sauce",
        "1:1",
        "Add a pinch of crumbled nori for a briny note",
        SEAFOOD,
    ),
    _entry(
        "oyster sauce",
        ["mushroom stir-fry sauce", "hoisin sauce"],
        "mushroom stir-fry sauce",
        "1:1",
        "Mushroom-based versions are sold as vegetarian oyster sauce",
        SEAFOOD,
    ),
    _entry(
        "salmon",
        ["marinated tofu", "smoked carrots"],
        "marinated tofu",
        "1:1 by weight",
        "Smoked carrots make a good lox substitute",
        SEAFOOD,
    ),
    _entry(
        "tuna",
        ["chickpea tuna", "jackfruit"],
        "chickpea tuna",
        "1:1 by volume",
        "Mash chickpeas with vegan mayonnaise and nori flakes",
        SEAFOOD,
    ),
    _entry(
        "shrimp",
        ["king oyster mushrooms", "konjac shrimp"],
        "king oyster mushrooms",
        "1:1 by weight",
        "Slice king oyster mushroom stems into rounds and sear",
        SEAFOOD,
    ),
    _entry(
        "crab",
        ["hearts of palm", "jackfruit"],
        "hearts of palm",
        "1:1 by weight",
        "Shredded hearts of palm work well in crab cakes",
        SEAFOOD,
    ),
    _entry(
        "anchovy",
        ["capers", "miso paste", "seaweed"],
        "capers",
        "1 anchovy = 1 tsp chopped capers",
        "Capers or miso provide the salty, briny depth",
        SEAFOOD,
    ),
    _entry(
        "fish",
        ["tofu", "jackfruit", "hearts of palm"],
        "tofu",
        "1:1 by weight",
        "Wrap tofu in nori before cooking for a taste of the sea",
        SEAFOOD,
    ),
    # Other
    _entry(
        "honey",
        ["maple syrup", "agave nectar", "date syrup"],
        "maple syrup",
        "1:1",
        "Agave is sweeter, so use slightly less",
        OTHER,
    ),
    _entry(
        "gelatin",
        ["agar agar", "pectin"],
        "agar agar",
        "1 tsp gelatin = 1 tsp agar powder",
        "Agar sets firmer and must be boiled to activate",
        OTHER,
    ),
]

CATALOG: Dict[str, CatalogEntry] = {entry.key: entry for entry in _ENTRIES}

# Everyday plant-based ingredients whose names contain a catalog key
VEGAN_COMPOUNDS: Tuple[str, ...] = (
    "eggplant",
    "butternut",
    "peanut butter",
    "almond butter",
    "cashew butter",
    "cocoa butter",
    "apple butter",
    "nut butter",
    "cream of tartar",
    "coconut milk",
    "coconut cream",
    "creamy",
    "honeydew",
    "oyster mushroom",
)

# Normalized qualifiers that mark a whole line as plant-based
VEGAN_QUALIFIERS: FrozenSet[str] = frozenset(
    {
        "vegan",
        "plantbased",
        "dairyfree",
        "nondairy",
        "eggless",
        "eggfree",
        "meatless",
        "meatfree",
    }
)
