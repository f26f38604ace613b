"""Sample sets data in the layout of the pkmn Smogon data dump."""

GEN9OU_SETS = {
    "Great Tusk": {
        "Bulky Spinner": {
            "moves": ["Rapid Spin", "Headlong Rush", ["Ice Spinner", "Knock Off"], "Bulk Up"],
            "item": "Leftovers",
            "ability": "Protosynthesis",
            "nature": "Jolly",
            "teratypes": ["Water", "Steel"],
            "evs": {"hp": 252, "def": 4, "spe": 252},
        },
    },
    "Landorus-Therian": {
        "Stealth Rock": {
            "moves": ["Stealth Rock", "Earthquake", "U-turn", "Taunt"],
            "item": "Rocky Helmet",
            "ability": "Intimidate",
            "nature": "Impish",
            "evs": [{"hp": 252, "def": 176, "spe": 80}, {"hp": 252, "def": 252}],
        },
        "Choice Scarf": {
            "moves": ["Earthquake", "U-turn", "Stone Edge", "Stealth Rock"],
            "item": "Choice Scarf",
            "ability": "Intimidate",
            "nature": "Jolly",
            "evs": {"atk": 252, "spd": 4, "spe": 252},
        },
    },
    "Gholdengo": {
        "Nasty Plot": {
            "moves": ["Nasty Plot", "Make It Rain", "Shadow Ball", "Recover"],
            "item": "Air Balloon",
            "ability": "Good as Gold",
            "nature": "Timid",
            "evs": {"spa": 252, "spd": 4, "spe": 252},
            "ivs": {"atk": 0},
        },
    },
}
