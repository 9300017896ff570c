"""Restaurant chain codes (R-codes) with dedicated nutrition datasets."""

import re

RESTAURANT_CODES: dict[str, str] = {
    "R0000": "7 Eleven",
    "R0001": "Applebees",
    "R0002": "Arbys",
    "R0003": "Auntie Annes",
    "R0004": "BJs Restaurant Brewhouse",
    "R0005": "Baskin Robbins",
    "R0006": "Bob Evans",
    "R0007": "Bojangles",
    "R0008": "Bonefish Grill",
    "R0009": "Boston Market",
    "R0010": "Burger King",
    "R0011": "California Pizza Kitchen",
    "R0012": "Captain Ds",
    "R0013": "Carls Jr",
    "R0014": "Carrabbas Italian Grill",
    "R0015": "Caseys General Store",
    "R0016": "Checkers Drive In Rallys",
    "R0017": "Chick fil A",
    "R0019": "Chilis",
    "R0020": "Chipotle",
    "R0021": "Chuck E Cheese",
    "R0022": "Churchs Chicken",
    "R0023": "Cicis Pizza",
    "R0024": "Culvers",
    "R0025": "Dairy Queen",
    "R0026": "Del Taco",
    "R0027": "Dennys",
    "R0028": "Dickeys Barbecue Pit",
    "R0029": "Dominos",
    "R0030": "Dunkin Donuts",
    "R0031": "Einstein Bros",
    "R0032": "El Pollo Loco",
    "R0033": "Famous Daves",
    "R0034": "Firehouse Subs",
    "R0035": "Five Guys",
    "R0036": "Friendlys",
    "R0037": "Frischs Big Boy",
    "R0038": "Golden Corral",
    "R0039": "Hardees",
    "R0040": "Hooters",
    "R0041": "IHOP",
    "R0042": "In N Out Burger",
    "R0043": "Jack in the Box",
    "R0044": "Jamba Juice",
    "R0045": "Jasons Deli",
    "R0046": "Jersey Mikes Subs",
    "R0047": "Joes Crab Shack",
    "R0048": "KFC",
    "R0049": "Krispy Kreme",
    "R0050": "Krystal",
    "R0051": "Little Caesars",
    "R0052": "Long John Silvers",
    "R0053": "LongHorn Steakhouse",
    "R0054": "Marcos Pizza",
    "R0055": "McAlisters Deli",
    "R0056": "McDonalds",
    "R0057": "Moes Southwest Grill",
    "R0058": "Noodles Company",
    "R0059": "OCharleys",
    "R0060": "Olive Garden",
    "R0061": "Outback Steakhouse",
    "R0062": "PF Changs",
    "R0063": "Panda Express",
    "R0064": "Panera Bread",
    "R0065": "Papa Johns",
    "R0066": "Papa Murphys",
    "R0067": "Perkins",
    "R0068": "Pizza Hut",
    "R0069": "Popeyes",
    "R0070": "Potbelly Sandwich Shop",
    "R0071": "Qdoba",
    "R0072": "Quiznos",
    "R0073": "Red Lobster",
    "R0074": "Red Robin",
    "R0075": "Romanos Macaroni Grill",
    "R0076": "Round Table Pizza",
    "R0077": "Ruby Tuesday",
    "R0078": "Sbarro",
    "R0079": "Sheetz",
    "R0080": "Sonic",
    "R0081": "Starbucks",
    "R0082": "Steak n Shake",
    "R0083": "Subway",
    "R0084": "TGI Fridays",
    "R0085": "Taco Bell",
    "R0086": "The Capital Grille",
    "R0087": "Tim Hortons",
    "R0088": "Wawa",
    "R0089": "Wendys",
    "R0090": "Whataburger",
    "R0091": "White Castle",
    "R0092": "Wingstop",
    "R0093": "Yard House",
    "R0094": "Zaxbys",
}

_CODE_PATTERN = re.compile(r"^R\d{4}$")
_NAME_NOISE = re.compile(r"[^a-z0-9]")

_CODES_BY_NAME: dict[str, str] = {
    _NAME_NOISE.sub("", name.lower()): code for code, name in RESTAURANT_CODES.items()
}


def is_restaurant_code(value: str) -> bool:
    """Return True if the value looks like an R-code."""
    return bool(_CODE_PATTERN.match(value))


def restaurant_name_for_code(code: str) -> str | None:
    """Return the chain name for an R-code, if known."""
    return RESTAURANT_CODES.get(code)


def code_for_restaurant(name: str) -> str | None:
    """Return the R-code for a restaurant name, ignoring case and punctuation."""
    return _CODES_BY_NAME.get(_NAME_NOISE.sub("", name.lower()))
