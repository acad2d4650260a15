"""Collectible item catalog awarded by boss battles.

Rows are inserted into ``items`` lazily the first time an entry is awarded,
keyed by (name, rarity, category).
"""

from __future__ import annotations

RARITIES = ("common", "rare", "epic", "legendary")

CATEGORIES = (
    "office_artifacts",
    "tech_relics",
    "startup_memorabilia",
    "business_tools",
    "corporate_treasures",
)

ITEM_CATALOG: list[dict] = [
    # Legendary
    {
        "name": "Steve Jobs' Lost Turtleneck",
        "description": "The mythical black turtleneck that inspired a generation of 'one more thing' presentations. Smells faintly of innovation.",
        "rarity": "legendary",
        "category": "startup_memorabilia",
    },
    {
        "name": "First Bitcoin Pizza Receipt",
        "description": "A crumpled receipt for two pizzas bought for 10,000 BTC. The most expensive pizza order in history!",
        "rarity": "legendary",
        "category": "tech_relics",
    },
    {
        "name": "Original Garage Door",
        "description": "The actual garage door where a certain tech company started. Still has chalk markings of the first business plan.",
        "rarity": "legendary",
        "category": "startup_memorabilia",
    },
    {
        "name": "The First Viral Tweet Framed in Gold",
        "description": "A golden frame containing the first tweet that ever went viral. Shows signs of being retweeted too many times.",
        "rarity": "legendary",
        "category": "tech_relics",
    },
    {
        "name": "Ancient Scroll of Terms & Conditions",
        "description": "The legendary scroll that nobody has ever read completely. Contains secrets of the digital realm.",
        "rarity": "legendary",
        "category": "corporate_treasures",
    },
    {
        "name": "The IPO Bell",
        "description": "A bell that rings with the sound of instant millionaires being created.",
        "rarity": "legendary",
        "category": "corporate_treasures",
    },
    # Epic
    {
        "name": "Y Combinator's Golden Hoodie",
        "description": "A mysterious hoodie that makes you look like you know what 'product-market fit' means.",
        "rarity": "epic",
        "category": "startup_memorabilia",
    },
    {
        "name": "The Unbreakable NDAs",
        "description": "A stack of NDAs so powerful they can keep even the office gossip quiet. Made from reinforced legal jargon.",
        "rarity": "epic",
        "category": "corporate_treasures",
    },
    {
        "name": "Web 1.0 Server Brick",
        "description": "An actual brick from the first web server. Still warm from processing <marquee> tags.",
        "rarity": "epic",
        "category": "tech_relics",
    },
    {
        "name": "The Eternal Coffee Mug",
        "description": "Legend says it once contained the first cup of coffee ever brewed in Silicon Valley.",
        "rarity": "epic",
        "category": "office_artifacts",
    },
    {
        "name": "Blockchain of Fools",
        "description": "A physical chain made of tiny blocks, each containing a questionable cryptocurrency whitepaper.",
        "rarity": "epic",
        "category": "tech_relics",
    },
    {
        "name": "The Holy Whiteboard",
        "description": "Ancient whiteboard containing the first MVP sketch. Still has uncleaned marker stains of billion-dollar ideas.",
        "rarity": "epic",
        "category": "office_artifacts",
    },
    {
        "name": "Zuckerberg's First Hoodie",
        "description": "The original gray hoodie that started the tech casual revolution. Slightly worn, heavily influential.",
        "rarity": "epic",
        "category": "startup_memorabilia",
    },
    {
        "name": "The Pitch Deck Prophecies",
        "description": "An ancient deck that perfectly predicted the rise and fall of countless startups. Slightly singed from friction burns.",
        "rarity": "epic",
        "category": "business_tools",
    },
    {
        "name": "The Unicorn Horn",
        "description": "A crystallized horn from a rare billion-dollar startup. Glows whenever a new funding round is announced.",
        "rarity": "epic",
        "category": "startup_memorabilia",
    },
    {
        "name": "The First Stack Overflow Answer",
        "description": "Preserved in digital amber, this answer solved a problem no one remembers having.",
        "rarity": "epic",
        "category": "tech_relics",
    },
    {
        "name": "The Scalability Scepter",
        "description": "A royal scepter that grows longer with each new user added.",
        "rarity": "epic",
        "category": "tech_relics",
    },
    {
        "name": "The Startup Graveyard Key",
        "description": "A mysterious key that opens the vault of failed startup ideas.",
        "rarity": "epic",
        "category": "startup_memorabilia",
    },
    # Rare
    {
        "name": "Prototype Post-It Notes",
        "description": "The original yellow sticky notes used to plan world domination, one task at a time.",
        "rarity": "rare",
        "category": "office_artifacts",
    },
    {
        "name": "The Broken Ping Pong Table",
        "description": "A battle-scarred table that witnessed countless startup pivots during intense matches.",
        "rarity": "rare",
        "category": "office_artifacts",
    },
    {
        "name": "Stand-Up Meeting Stool",
        "description": "The ironic stool used in the world's longest 'quick' stand-up meeting.",
        "rarity": "rare",
        "category": "office_artifacts",
    },
    {
        "name": "Venture Capitalist's Monocle",
        "description": "Helps you see through pitch decks and straight to the bottom line.",
        "rarity": "rare",
        "category": "business_tools",
    },
    {
        "name": "The Rubber Duck of Debugging",
        "description": "A legendary rubber duck that has heard more coding problems than any therapist.",
        "rarity": "rare",
        "category": "tech_relics",
    },
    {
        "name": "The Beta Tester's Notebook",
        "description": "Contains detailed notes of bugs that should never have made it to production, but did.",
        "rarity": "rare",
        "category": "tech_relics",
    },
    {
        "name": "The Mechanical Keyboard of Focus",
        "description": "So loud it drowns out all distractions and office gossip. Cherry MX switches included.",
        "rarity": "rare",
        "category": "office_artifacts",
    },
    {
        "name": "The Founder's Flip-Flops",
        "description": "Well-worn flip-flops that walked the halls of countless tech conferences.",
        "rarity": "rare",
        "category": "startup_memorabilia",
    },
    {
        "name": "The Business Model Canvas",
        "description": "A mystical canvas that's witnessed thousands of pivot brainstorming sessions.",
        "rarity": "rare",
        "category": "business_tools",
    },
    {
        "name": "The Angel Investor's Halo",
        "description": "Slightly tarnished from one too many seed rounds, but still sparkles in pitch meetings.",
        "rarity": "rare",
        "category": "corporate_treasures",
    },
    {
        "name": "The Perpetual Beta Badge",
        "description": "A badge proudly proclaiming 'Beta Tester Since Forever'. Somehow still hasn't reached v1.0.",
        "rarity": "rare",
        "category": "tech_relics",
    },
    {
        "name": "The Blockchain Beanie",
        "description": "A beanie that's been mined from the depths of crypto winter.",
        "rarity": "rare",
        "category": "tech_relics",
    },
    {
        "name": "The Cloud Storage Snowglobe",
        "description": "Shake it to see your data float around in the cloud.",
        "rarity": "rare",
        "category": "tech_relics",
    },
    # Common
    {
        "name": "Startup Sticker Collection",
        "description": "A pristine collection of stickers from startups that no longer exist.",
        "rarity": "common",
        "category": "startup_memorabilia",
    },
    {
        "name": "The Mythical Man-Month Calendar",
        "description": "A calendar that always shows you're behind schedule, no matter how early you start.",
        "rarity": "common",
        "category": "business_tools",
    },
    {
        "name": "Pizza-Stained Keyboard",
        "description": "A keyboard bearing the marks of countless late-night coding sessions.",
        "rarity": "common",
        "category": "office_artifacts",
    },
    {
        "name": "The Infinite Todo List",
        "description": "A scrolling parchment that generates new tasks faster than you can complete them.",
        "rarity": "common",
        "category": "business_tools",
    },
    {
        "name": "The Reply-All Chain Mail",
        "description": "An actual chain mail made from the metal of computers destroyed by reply-all storms.",
        "rarity": "common",
        "category": "office_artifacts",
    },
    {
        "name": "The Casual Friday Hawaiian Shirt",
        "description": "Has survived hundreds of casual Fridays and still looks painfully casual.",
        "rarity": "common",
        "category": "office_artifacts",
    },
    {
        "name": "The LinkedIn Premium Crown",
        "description": "A slightly dented crown that gives you the power to see who viewed your profile.",
        "rarity": "common",
        "category": "corporate_treasures",
    },
    {
        "name": "The Expired Domain Collection",
        "description": "A book of domain names that could have been worth millions... maybe.",
        "rarity": "common",
        "category": "tech_relics",
    },
    {
        "name": "The Agile Sprint Shoes",
        "description": "Well-worn shoes that have run through countless sprint planning sessions.",
        "rarity": "common",
        "category": "office_artifacts",
    },
    {
        "name": "The Stack of Business Cards",
        "description": "A stack of cards from networking events, most with coffee stains and scribbled notes.",
        "rarity": "common",
        "category": "business_tools",
    },
    {
        "name": "The Motivational Poster Collection",
        "description": "A set of posters that have inspired eye rolls across thousands of offices.",
        "rarity": "common",
        "category": "office_artifacts",
    },
    {
        "name": "The Beta Version Badge",
        "description": "A badge that's been in beta longer than most startups have existed.",
        "rarity": "common",
        "category": "tech_relics",
    },
    {
        "name": "The Viral Growth Chart",
        "description": "A chart showing hockey stick growth that looks suspiciously like a hockey stick.",
        "rarity": "common",
        "category": "business_tools",
    },
    {
        "name": "The Disruption Button",
        "description": "A big red button that's been pressed by every 'disruptive' startup founder.",
        "rarity": "common",
        "category": "startup_memorabilia",
    },
    {
        "name": "The Pivot Table of Destiny",
        "description": "An Excel sheet that's pivoted so many times it's achieved consciousness.",
        "rarity": "common",
        "category": "business_tools",
    },
]


def items_of_rarity(rarity: str) -> list[dict]:
    """Catalog entries of one rarity, in catalog order."""
    return [item for item in ITEM_CATALOG if item["rarity"] == rarity]
