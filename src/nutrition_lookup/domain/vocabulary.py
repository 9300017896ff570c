"""Static vocabulary tables used by the normalizer and matcher."""

# Order matters for every tuple below: the first match wins.

WEIGHT_PATTERNS: tuple[str, ...] = (
    r"\d+(?:\.\d+)?\s*(?:oz|ounces?|lbs?|kg|ml|g)\b",
)

PRICE_PATTERNS: tuple[str, ...] = (
    r"\$\s*\d+(?:[.,]\d+)?",
    r"\d+\.\d+",
    r"\b\d{1,2}\b",
    r"\d+",
)

NOISE_WORDS: tuple[str, ...] = (
    "served with",
    "comes with",
    "includes",
    "with",
    "w/",
    "and",
    "fresh",
    "hot",
    "cold",
    "new",
    "signature",
    "house",
    "chef's",
)

COOKING_METHODS: tuple[str, ...] = (
    "grilled",
    "fried",
    "baked",
    "roasted",
    "steamed",
    "boiled",
    "sautéed",
    "sauteed",
    "blackened",
    "charred",
    "smoked",
    "barbecued",
    "crispy",
    "crunchy",
)

PROTEIN_TERMS: tuple[str, ...] = (
    "chicken",
    "beef",
    "pork",
    "turkey",
    "fish",
    "salmon",
    "tuna",
    "shrimp",
    "lamb",
    "duck",
    "crab",
    "lobster",
    "scallops",
    "tofu",
    "tempeh",
)

GENERIC_FOOD_TERMS: tuple[str, ...] = (
    # dairy
    "goat cheese",
    "cheese",
    "cheddar",
    "mozzarella",
    "parmesan",
    "feta",
    "yogurt",
    "milk",
    "cream",
    "butter",
    # vegetables
    "lettuce",
    "spinach",
    "arugula",
    "tomato",
    "onion",
    "mushroom",
    "pepper",
    "cucumber",
    "avocado",
    "broccoli",
    "carrot",
    # grains and starches
    "rice",
    "pasta",
    "bread",
    "potato",
    "quinoa",
    "couscous",
    "noodles",
    # prepared foods
    "salad",
    "soup",
    "sandwich",
    "burger",
    "pizza",
    "wrap",
    "bowl",
    "hummus",
    "guacamole",
    "salsa",
)

COMPOUND_FOODS: tuple[str, ...] = (
    "caesar salad",
    "greek salad",
    "chicken sandwich",
    "turkey sandwich",
    "cheese burger",
    "veggie burger",
    "fish tacos",
    "chicken tacos",
    "chocolate chip",
    "peanut butter",
    "mac and cheese",
    "grilled cheese",
)

ACCOMPANIMENT_TERMS: tuple[str, ...] = (
    "sauce",
    "dressing",
    "mayo",
    "mustard",
    "ketchup",
    "aioli",
    "side",
    "fries",
    "chips",
    "crackers",
    "bread",
    "roll",
    "rice",
    "beans",
    "slaw",
    "gravy",
    "salsa",
)

STOP_WORDS: frozenset[str] = frozenset(
    {
        "with",
        "and",
        "or",
        "the",
        "a",
        "an",
        "in",
        "on",
        "at",
        "to",
        "for",
        "of",
        "from",
        "includes",
        "served",
        "raw",
        "cooked",
    }
)

BRAND_CATEGORY_TOKENS: frozenset[str] = frozenset(
    {
        "mcdonalds",
        "subway",
        "starbucks",
        "kfc",
        "pizza",
        "burger",
        "taco",
        "chicken",
        "dunkin",
    }
)

MATCH_PROTEIN_TOKENS: frozenset[str] = frozenset(
    {"chicken", "beef", "fish", "salmon", "turkey", "pork", "shrimp", "lamb"}
)

PREPARATION_TOKENS: frozenset[str] = frozenset(
    {"grilled", "fried", "baked", "roasted", "steamed"}
)

FOOD_CATEGORIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("snacks", ("chips", "crackers", "cookies", "candy")),
    ("dairy", ("cheese", "milk", "yogurt", "butter")),
    ("meat", ("chicken", "beef", "pork", "turkey", "ham")),
    ("seafood", ("fish", "shrimp", "salmon", "tuna")),
    ("beverages", ("juice", "soda", "coffee", "tea")),
    ("bread", ("bread", "toast", "sandwich", "bun")),
    ("fruits", ("apple", "banana", "orange", "berry")),
    ("vegetables", ("salad", "lettuce", "tomato", "carrot")),
)


def infer_food_category(primary_food: str) -> str | None:
    """Return the first category whose keywords appear in the primary food."""
    for category, keywords in FOOD_CATEGORIES:
        if any(keyword in primary_food for keyword in keywords):
            return category
    return None
